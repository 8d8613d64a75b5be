"""Jinja2 template rendering for HTML emails."""

from pathlib import Path
from typing import Any, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "resources"


class JinjaTemplateRenderer:
    """Renders email templates from a directory.

    HTML and XML templates are autoescaped, so context values coming from
    callers cannot inject markup.

    Args:
        template_dir: Directory holding templates (default: the bundled
            ``resources/`` directory with ``notification.html``)
    """

    def __init__(self, template_dir: Optional[str] = None):
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "htm", "xml"]),
        )

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        """Render a template with the given context.

        Raises:
            jinja2.TemplateNotFound: If the template does not exist
        """
        template = self._env.get_template(template_name)
        return template.render(dict(context))
