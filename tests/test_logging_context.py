"""Tests for scoped logging context."""

import threading

from pastewatch.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_by_default():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(cycle_id="c1")
    assert get_log_context() == {"cycle_id": "c1"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_context_manager_nesting():
    with log_context(cycle_id="c1"):
        with log_context(paste_key="AbCd1234"):
            assert get_log_context() == {"cycle_id": "c1", "paste_key": "AbCd1234"}
        assert get_log_context() == {"cycle_id": "c1"}
    assert get_log_context() == {}


def test_context_restored_after_exception():
    try:
        with log_context(cycle_id="c1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert get_log_context() == {}


def test_get_returns_copy():
    with log_context(cycle_id="c1"):
        get_log_context()["cycle_id"] = "changed"
        assert get_log_context()["cycle_id"] == "c1"


def test_context_is_per_thread():
    seen = {}

    def worker():
        seen["worker"] = get_log_context()

    with log_context(cycle_id="main-only"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["worker"] == {}


def test_clear():
    push_log_context(cycle_id="c1")
    clear_log_context()
    assert get_log_context() == {}
