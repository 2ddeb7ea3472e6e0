"""Mail notifications for matched pastes and escalated errors.

- NotificationService: renders and sends paste alerts and error alerts
- TemplateRenderer: Jinja2 rendering of the email_templates sets
- SMTPClient: smtplib wrapper with TLS/SSL support
"""

from .models import (
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .payloads import build_error_context, build_paste_context
from .service import NotificationService
from .smtp_client import SMTPClient, build_sender_address, parse_recipients
from .templates import TemplateRenderer

__all__ = [
    "NotificationService",
    "NotificationResult",
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    "TemplateRenderer",
    "SMTPClient",
    "build_paste_context",
    "build_error_context",
    "build_sender_address",
    "parse_recipients",
]
