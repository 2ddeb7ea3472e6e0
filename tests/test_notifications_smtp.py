"""Unit tests for the SMTP client wrapper.

Tests the SMTPClient for:
- Connection handling (SMTP and SMTP_SSL)
- STARTTLS negotiation
- Authentication (with and without credentials)
- Error wrapping
- Recipient parsing and sender address building
"""

import smtplib
from email.message import EmailMessage
from unittest.mock import MagicMock, Mock

import pytest

from pastewatch.config.environment import EnvironmentConfig
from pastewatch.notifications.models import SMTPDeliveryError
from pastewatch.notifications.smtp_client import (
    SMTPClient,
    build_sender_address,
    parse_recipients,
)


@pytest.fixture
def env_config_with_auth():
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="watcher@example.com",
        smtp_pass="secret123",
        alert_to_email="soc@example.com",
        smtp_sender_name="Paste Watch",
    )


@pytest.fixture
def env_config_without_auth():
    return EnvironmentConfig(
        smtp_host="mail.internal.example.com",
        smtp_port=25,
        smtp_user=None,
        smtp_pass=None,
        alert_to_email="soc@example.com",
    )


@pytest.fixture
def env_config_implicit_tls():
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=465,
        smtp_user="watcher@example.com",
        smtp_pass="apppassword",
        alert_to_email="soc@example.com",
    )


@pytest.fixture
def sample_message():
    msg = EmailMessage()
    msg["Subject"] = "[pastewatch] password found in paste AbCd1234"
    msg["From"] = "watcher@example.com"
    msg["To"] = "soc@example.com"
    msg.set_content("body")
    return msg


def test_default_factories_are_smtplib():
    client = SMTPClient()

    assert client.smtp_factory is smtplib.SMTP
    assert client.smtp_ssl_factory is smtplib.SMTP_SSL


def test_send_with_starttls(env_config_with_auth, sample_message):
    mock_smtp = MagicMock()
    mock_factory = Mock(return_value=mock_smtp)

    SMTPClient(smtp_factory=mock_factory, timeout=15).send(
        sample_message, env_config_with_auth, use_tls=True
    )

    mock_factory.assert_called_once_with("smtp.example.com", 587, timeout=15)
    mock_smtp.starttls.assert_called_once()
    mock_smtp.login.assert_called_once_with("watcher@example.com", "secret123")
    mock_smtp.send_message.assert_called_once_with(sample_message)
    mock_smtp.quit.assert_called_once()


def test_send_with_implicit_tls(env_config_implicit_tls, sample_message):
    mock_smtp_ssl = MagicMock()
    mock_ssl_factory = Mock(return_value=mock_smtp_ssl)
    mock_factory = Mock()

    SMTPClient(smtp_factory=mock_factory, smtp_ssl_factory=mock_ssl_factory).send(
        sample_message, env_config_implicit_tls, use_tls=True
    )

    mock_factory.assert_not_called()
    assert mock_ssl_factory.call_args.args == ("smtp.example.com", 465)
    assert "context" in mock_ssl_factory.call_args.kwargs
    mock_smtp_ssl.starttls.assert_not_called()
    mock_smtp_ssl.send_message.assert_called_once_with(sample_message)
    mock_smtp_ssl.quit.assert_called_once()


def test_send_without_auth_or_tls(env_config_without_auth, sample_message):
    mock_smtp = MagicMock()

    SMTPClient(smtp_factory=Mock(return_value=mock_smtp)).send(
        sample_message, env_config_without_auth, use_tls=False
    )

    mock_smtp.starttls.assert_not_called()
    mock_smtp.login.assert_not_called()
    mock_smtp.send_message.assert_called_once_with(sample_message)


def test_smtp_exception_is_wrapped(env_config_with_auth, sample_message):
    mock_smtp = MagicMock()
    mock_smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

    with pytest.raises(SMTPDeliveryError) as exc_info:
        SMTPClient(smtp_factory=Mock(return_value=mock_smtp)).send(
            sample_message, env_config_with_auth
        )

    assert "SMTP error" in str(exc_info.value)
    mock_smtp.quit.assert_called_once()


def test_network_error_is_wrapped(env_config_with_auth, sample_message):
    mock_factory = Mock(side_effect=ConnectionRefusedError("refused"))

    with pytest.raises(SMTPDeliveryError) as exc_info:
        SMTPClient(smtp_factory=mock_factory).send(sample_message, env_config_with_auth)

    assert "Network error" in str(exc_info.value)


def test_quit_failure_is_ignored(env_config_with_auth, sample_message):
    mock_smtp = MagicMock()
    mock_smtp.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

    SMTPClient(smtp_factory=Mock(return_value=mock_smtp)).send(
        sample_message, env_config_with_auth
    )

    mock_smtp.send_message.assert_called_once()


def test_parse_recipients():
    assert parse_recipients("soc@example.com, oncall@example.com") == [
        "soc@example.com",
        "oncall@example.com",
    ]


def test_parse_recipients_skips_blank_entries():
    assert parse_recipients("soc@example.com,, ") == ["soc@example.com"]


def test_parse_recipients_invalid():
    with pytest.raises(ValueError, match="Invalid email address"):
        parse_recipients("soc@example.com, nope")


def test_parse_recipients_empty():
    with pytest.raises(ValueError, match="No valid email addresses"):
        parse_recipients(" , ")


def test_build_sender_address(env_config_with_auth, env_config_without_auth):
    assert build_sender_address(env_config_with_auth) == "Paste Watch <watcher@example.com>"
    assert (
        build_sender_address(env_config_without_auth)
        == "pastewatch <noreply@mail.internal.example.com>"
    )
