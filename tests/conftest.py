"""Shared fixtures for pastewatch tests."""

import threading

import pytest

from pastewatch.config.environment import EnvironmentConfig
from pastewatch.logging.context import clear_log_context

SAMPLE_CONFIG_YAML = """
keywords:
  - keyword: password
    exceptions:
      - testpassword
  - keyword: example.com
mailOnError: true
scraper:
  poll_interval: 2m
  item_delay: 2s
  retention: 15m
email:
  subject_prefix: "[test]"
logging:
  level: WARNING
  format: json
"""


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set the environment variables load_config() requires."""
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("ALERT_TO_EMAIL", "alerts@example.com")
    monkeypatch.delenv("SMTP_USER", raising=False)
    monkeypatch.delenv("SMTP_PASS", raising=False)
    monkeypatch.delenv("SMTP_SENDER_NAME", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def env_config():
    """Environment config without SMTP authentication."""
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user=None,
        smtp_pass=None,
        alert_to_email="alerts@example.com",
    )


@pytest.fixture
def sample_config_file(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(SAMPLE_CONFIG_YAML)
    return config_file


@pytest.fixture
def events():
    """(terminate_event, cancel_event) pair."""
    return threading.Event(), threading.Event()


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()
