"""Result types and exceptions for the notification service."""

from dataclasses import dataclass, field
from typing import List, Optional


class NotificationError(Exception):
    """Base exception for notification failures."""


class NotificationTemplateError(NotificationError):
    """Raised when a template cannot be rendered."""


class SMTPDeliveryError(NotificationError):
    """Raised when the SMTP server did not accept the message."""


@dataclass
class NotificationResult:
    """A notification that was handed to the SMTP server.

    Attributes:
        kind: "paste" for match alerts, "error" for escalations
        subject: Rendered subject line
        recipients: Addresses the message was sent to
        reference: Paste key or error stage the message is about
    """

    kind: str
    subject: str
    recipients: List[str] = field(default_factory=list)
    reference: Optional[str] = None
