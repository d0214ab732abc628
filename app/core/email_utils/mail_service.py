import os
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.datetime_utils import get_now_utc

# Templates live next to this module
jinja_env = Environment(
    loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
    autoescape=select_autoescape(["html", "xml"])
)

ALERT_COLORS = {
    "success": {"bg": "#d4edda", "border": "#28a745", "text": "#155724"},
    "warning": {"bg": "#fff3cd", "border": "#ffc107", "text": "#856404"},
    "info": {"bg": "#d1ecf1", "border": "#17a2b8", "text": "#0c5460"},
}


def render_email(template_name: str, subject: str, **context: Any) -> str:
    """Render a template that extends base.html"""
    template = jinja_env.get_template(template_name)
    alert_type = context.pop("alert_type", "info")
    return template.render(
        subject=subject,
        alert=ALERT_COLORS.get(alert_type, ALERT_COLORS["info"]),
        current_year=get_now_utc().year,
        **context,
    )
