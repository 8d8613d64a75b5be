"""Delivery collaborators used by the notification transports."""
