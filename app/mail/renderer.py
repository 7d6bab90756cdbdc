"""HTML rendering for outgoing mail."""
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.tickets.money import format_price

EMAIL_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


class TemplateRenderer:
    """Render Jinja2 email templates by name."""

    def __init__(self, directory: Path | str = EMAIL_TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(directory)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["price"] = format_price

    def render(self, template_name: str, variables: dict) -> str:
        return self.env.get_template(template_name).render(**variables)
