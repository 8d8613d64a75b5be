"""Infrastructure modules for the notifier.

Centralized infrastructure components:
- configuration: Settings management (settings, Settings)
- logging: Structured logging (configure_logging, get_module_logger)
- resilience: Rate limiters, circuit breakers, retriers and guards
- notifications: Notification dispatcher and transports
- services: Application-scoped providers (get_settings,
  get_notification_service)
"""
