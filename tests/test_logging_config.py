"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from pastewatch.logging import ComponentLoggerAdapter, get_logger
from pastewatch.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from pastewatch.logging.context import log_context


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg="Test message", level=logging.INFO, extra=None):
    logger = logging.getLogger("pastewatch.test")
    return logger.makeRecord("pastewatch.test", level, "test.py", 1, msg, (), None, extra=extra)


def test_json_formatter_basic():
    output = JSONFormatter().format(make_record())

    log_obj = json.loads(output)
    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "pastewatch.test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_with_extra_fields():
    record = make_record(extra={"event": "poll.cycle.completed", "matched": 2, "stopped": False})

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "poll.cycle.completed"
    assert log_obj["matched"] == 2
    assert log_obj["stopped"] is False


def test_json_formatter_stringifies_unknown_types():
    record = make_record(extra={"route": object()})

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["route"].startswith("<object")


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.getLogger("x").makeRecord(
            "x", logging.ERROR, "t.py", 1, "failed", (), sys.exc_info()
        )

    log_obj = json.loads(JSONFormatter().format(record))

    assert "ValueError: bad" in log_obj["exc_info"]


def test_key_value_formatter():
    formatter = KeyValueFormatter("[%(levelname)s] %(message)s")
    record = make_record(
        extra={"event": "poll.item.matched", "paste_key": "AbCd1234", "stopped": True}
    )

    output = formatter.format(record)

    assert output.startswith("[INFO] Test message ")
    assert "event=poll.item.matched" in output
    assert "paste_key=AbCd1234" in output
    assert "stopped=true" in output


def test_key_value_formatter_quotes_values_with_spaces():
    formatter = KeyValueFormatter("%(message)s")
    record = make_record(extra={"reason": "HTTP 503 from upstream", "none": None})

    output = formatter.format(record)

    assert 'reason="HTTP 503 from upstream"' in output
    assert "none=null" in output


def test_key_value_formatter_skips_service_fields():
    formatter = KeyValueFormatter("%(message)s")
    record = make_record()
    ContextualFilter(environment="test").filter(record)

    assert formatter.format(record) == "Test message"


def test_contextual_filter_adds_context():
    record = make_record()

    with log_context(cycle_id="c1", paste_key="AbCd1234"):
        assert ContextualFilter(environment="prod").filter(record)

    assert record.service == "pastewatch"
    assert record.environment == "prod"
    assert record.cycle_id == "c1"
    assert record.paste_key == "AbCd1234"


def test_contextual_filter_keeps_explicit_extra():
    record = make_record(extra={"paste_key": "explicit"})

    with log_context(paste_key="from-context"):
        ContextualFilter().filter(record)

    assert record.paste_key == "explicit"


def test_configure_logging_json(restore_root_logger):
    configure_logging(level="DEBUG", format_type="json")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger("apscheduler").level == logging.WARNING


def test_configure_logging_key_value(restore_root_logger):
    configure_logging(level="error", format_type="key-value")

    root = logging.getLogger()
    assert root.level == logging.ERROR
    assert isinstance(root.handlers[0].formatter, KeyValueFormatter)
    assert logging.getLogger("apscheduler").level == logging.ERROR


def test_configure_logging_invalid_level(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="LOUD")


def test_configure_logging_invalid_format(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_get_logger_with_component():
    logger = get_logger("pastewatch.test", component="poller")

    assert isinstance(logger, ComponentLoggerAdapter)
    msg, kwargs = logger.process("hello", {"extra": {"event": "x"}})
    assert kwargs["extra"] == {"component": "poller", "event": "x"}


def test_get_logger_without_component():
    assert isinstance(get_logger("pastewatch.test"), logging.Logger)
