"""Notification service: renders and mails paste alerts and error escalations.

Each send is a single attempt. Callers decide what a failure means: the
output worker re-reports it as an operational error, the error worker only
logs it.
"""

import logging
from email.message import EmailMessage
from typing import Dict, Optional

from pastewatch.config.environment import EnvironmentConfig
from pastewatch.config.models import EmailConfig
from pastewatch.domain.models import MatchedPaste, OperationalError
from pastewatch.logging import get_logger

from .models import NotificationError, NotificationResult
from .payloads import build_error_context, build_paste_context
from .smtp_client import SMTPClient, build_sender_address, parse_recipients
from .templates import ERROR_ALERT, PASTE_ALERT, TemplateRenderer

logger = get_logger(__name__, component="notification")


class NotificationService:
    """Sends alert mails through SMTP.

    Shared by both delivery workers; it keeps no mutable state after
    construction, and the SMTP client opens a fresh connection per message.
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            env_config: SMTP host, credentials and recipients
            email_config: TLS flag, subject prefix and excerpt length
            template_renderer: Template renderer instance (creates default if None)
            smtp_client: SMTP client instance (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.env_config = env_config
        self.email_config = email_config or EmailConfig()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient()
        self.logger = logger_instance or logger

    def send_paste_alert(self, matched: MatchedPaste) -> NotificationResult:
        """Mail an alert for a matched paste.

        Raises:
            NotificationError: If rendering, addressing or delivery fails
        """
        context = build_paste_context(
            matched,
            subject_prefix=self.email_config.subject_prefix,
            max_body_chars=self.email_config.max_body_chars,
        )
        result = self._send("paste", PASTE_ALERT, context, reference=matched.key)
        self.logger.info(
            f"Paste alert sent for {matched.key} to {', '.join(result.recipients)}",
            extra={
                "event": "notification.paste.sent",
                "paste_key": matched.key,
                "keywords": matched.keywords,
            },
        )
        return result

    def send_error_alert(self, error: OperationalError) -> NotificationResult:
        """Mail an operational error.

        Raises:
            NotificationError: If rendering, addressing or delivery fails
        """
        context = build_error_context(error, subject_prefix=self.email_config.subject_prefix)
        result = self._send("error", ERROR_ALERT, context, reference=error.stage.value)
        self.logger.info(
            "Error alert sent",
            extra={"event": "notification.error.sent", "stage": error.stage.value},
        )
        return result

    def _send(
        self, kind: str, template: str, context: Dict, reference: Optional[str]
    ) -> NotificationResult:
        rendered = self.template_renderer.render(template, context)

        try:
            recipients = parse_recipients(self.env_config.alert_to_email)
            message = EmailMessage()
            message["Subject"] = rendered["subject"]
            message["From"] = build_sender_address(self.env_config)
            message["To"] = ", ".join(recipients)
            message.set_content(rendered["text_body"])
            if "html_body" in rendered:
                message.add_alternative(rendered["html_body"], subtype="html")
        except ValueError as e:
            raise NotificationError(f"Failed to build email message: {e}") from e

        self.smtp_client.send(message, self.env_config, self.email_config.use_tls)

        return NotificationResult(
            kind=kind,
            subject=rendered["subject"],
            recipients=recipients,
            reference=reference,
        )
