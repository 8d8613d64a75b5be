"""Unit tests for Jinja2 email template rendering."""

import pytest
from jinja2 import TemplateNotFound

from integrations.email.templates import DEFAULT_TEMPLATE_DIR, JinjaTemplateRenderer


@pytest.mark.unit
class TestJinjaTemplateRenderer:
    """Tests for template rendering."""

    def test_uses_bundled_templates_by_default(self):
        assert JinjaTemplateRenderer().template_dir == DEFAULT_TEMPLATE_DIR

    def test_renders_bundled_notification(self):
        html = JinjaTemplateRenderer().render(
            "notification.html",
            {
                "title": "[error] billing - Export failed",
                "message": "Nightly export did not finish",
                "context": {"job_id": "42"},
            },
        )

        assert "[error] billing - Export failed" in html
        assert "Nightly export did not finish" in html
        assert "job_id" in html
        assert "42" in html

    def test_escapes_markup(self):
        html = JinjaTemplateRenderer().render(
            "notification.html",
            {"title": "t", "message": "<script>alert(1)</script>", "context": {}},
        )

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_custom_template_dir(self, tmp_path):
        (tmp_path / "short.html").write_text("{{ title }}: {{ message }}")

        renderer = JinjaTemplateRenderer(str(tmp_path))

        assert renderer.render("short.html", {"title": "T", "message": "M"}) == "T: M"

    def test_missing_template(self, tmp_path):
        with pytest.raises(TemplateNotFound):
            JinjaTemplateRenderer(str(tmp_path)).render("missing.html", {})

    def test_context_may_use_reserved_python_names(self, tmp_path):
        (tmp_path / "owner.html").write_text("{{ self_name }}/{{ title }}")

        html = JinjaTemplateRenderer(str(tmp_path)).render(
            "owner.html",
            {"self": "billing", "self_name": "billing", "title": "T", "context": {}},
        )

        assert html == "billing/T"
