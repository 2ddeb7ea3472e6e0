"""Environment variable loading and validation."""

import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """SMTP credentials and other settings that stay out of the config file."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_user: Optional[str],
        smtp_pass: Optional[str],
        alert_to_email: str,
        smtp_sender_name: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.alert_to_email = alert_to_email
        self.smtp_sender_name = smtp_sender_name or "pastewatch"
        self.log_level = log_level


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required: SMTP_HOST, SMTP_PORT, ALERT_TO_EMAIL (comma-separated).
    Optional: SMTP_USER and SMTP_PASS (set both or neither),
    SMTP_SENDER_NAME, LOG_LEVEL.

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")
    alert_to_email = os.getenv("ALERT_TO_EMAIL")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    log_level = os.getenv("LOG_LEVEL")

    for name, value in (
        ("SMTP_HOST", smtp_host),
        ("SMTP_PORT", smtp_port_str),
        ("ALERT_TO_EMAIL", alert_to_email),
    ):
        if not value:
            errors.append(f"Missing required environment variable: {name}")

    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if not 1 <= smtp_port <= 65535:
                errors.append(f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer.")

    if alert_to_email:
        for address in (a.strip() for a in alert_to_email.split(",")):
            try:
                validate_email(address, check_deliverability=False)
            except EmailNotValidError:
                errors.append(f"Invalid email address format in ALERT_TO_EMAIL: '{address}'")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if bool(smtp_user) != bool(smtp_pass):
        errors.append("SMTP_USER and SMTP_PASS must be set together for authentication.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SMTP settings",
                "Ensure SMTP_HOST, SMTP_PORT and ALERT_TO_EMAIL are set",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        alert_to_email=alert_to_email,
        smtp_sender_name=smtp_sender_name,
        log_level=log_level.upper() if log_level else None,
    )
