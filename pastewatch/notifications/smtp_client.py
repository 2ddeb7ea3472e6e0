"""SMTP transport for alert mails."""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, List, Optional

from email_validator import EmailNotValidError, validate_email

from pastewatch.config.environment import EnvironmentConfig

from .models import SMTPDeliveryError

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Opens one SMTP connection per message and always closes it.

    The smtplib classes are injectable so tests never open sockets.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
        timeout: float = 30,
    ):
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL
        self.timeout = timeout

    def send(
        self,
        message: EmailMessage,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
    ) -> None:
        """
        Deliver ``message``.

        Port 465 uses implicit TLS; any other port upgrades with STARTTLS
        when ``use_tls`` is set. Credentials are used when both are present.

        Raises:
            SMTPDeliveryError: If connecting, authenticating or sending fails
        """
        smtp = None
        host, port = env_config.smtp_host, env_config.smtp_port
        try:
            if port == IMPLICIT_TLS_PORT:
                logger.debug(f"Connecting to {host}:{port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    host, port, timeout=self.timeout, context=ssl.create_default_context()
                )
            else:
                logger.debug(f"Connecting to {host}:{port}")
                smtp = self.smtp_factory(host, port, timeout=self.timeout)
                if use_tls:
                    smtp.starttls(context=ssl.create_default_context())

            if env_config.smtp_user and env_config.smtp_pass:
                smtp.login(env_config.smtp_user, env_config.smtp_pass)

            smtp.send_message(message)
            logger.debug(f"Message sent to {message['To']}")

        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


def parse_recipients(recipient_string: str) -> List[str]:
    """
    Split and validate a comma-separated address list.

    Raises:
        ValueError: If an address is invalid or the list is empty
    """
    recipients = []
    for address in (a.strip() for a in recipient_string.split(",")):
        if not address:
            continue
        try:
            recipients.append(validate_email(address, check_deliverability=False).normalized)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address in ALERT_TO_EMAIL: '{address}' - {e}") from e

    if not recipients:
        raise ValueError("No valid email addresses found in ALERT_TO_EMAIL")
    return recipients


def build_sender_address(env_config: EnvironmentConfig) -> str:
    """'Name <smtp_user>' or, without credentials, 'Name <noreply@smtp_host>'."""
    sender_email = env_config.smtp_user or f"noreply@{env_config.smtp_host}"
    return f"{env_config.smtp_sender_name} <{sender_email}>"
