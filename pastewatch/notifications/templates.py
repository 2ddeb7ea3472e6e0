"""Jinja2 rendering of alert mails."""

import logging
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)

PASTE_ALERT = "paste_alert"
ERROR_ALERT = "error_alert"


class TemplateRenderer:
    """Renders a named template set into subject, text body and optional HTML body.

    A set ``name`` consists of ``<name>_subject.j2``, ``<name>_body.txt.j2``
    and, if present, ``<name>_body.html.j2`` in the package's
    email_templates directory. Undefined variables are errors.
    """

    def __init__(self, template_dir: str = "email_templates"):
        self.env = Environment(
            loader=PackageLoader("pastewatch.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def has_html(self, name: str) -> bool:
        return f"{name}_body.html.j2" in self.env.list_templates()

    def render(self, name: str, context: Dict) -> Dict[str, str]:
        """
        Render the template set ``name``.

        Returns:
            Dict with ``subject`` (single line), ``text_body`` and, when the
            set has one, ``html_body``

        Raises:
            NotificationTemplateError: If any template is missing or fails
        """
        try:
            subject = self.env.get_template(f"{name}_subject.j2").render(context)
            rendered = {
                "subject": " ".join(subject.split()),
                "text_body": self.env.get_template(f"{name}_body.txt.j2").render(context),
            }
            if self.has_html(name):
                rendered["html_body"] = self.env.get_template(f"{name}_body.html.j2").render(
                    context
                )
        except TemplateError as e:
            raise NotificationTemplateError(f"Template rendering failed for '{name}': {e}") from e

        logger.debug(f"Rendered '{name}' templates")
        return rendered
