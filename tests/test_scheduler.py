"""Unit tests for the scheduler service.

Tests the SchedulerService including:
- Job defaults (max_instances=1, coalesce)
- Immediate first run
- No overlapping cycles
- Start/shutdown lifecycle
- trigger_now
"""

import threading
import time
from datetime import datetime
from unittest.mock import Mock

from pastewatch.scheduler import SchedulerService


class TestSchedulerService:
    """Test suite for SchedulerService."""

    def test_scheduler_initialization(self):
        mock_callable = Mock()
        shutdown_event = threading.Event()

        scheduler = SchedulerService(
            cycle_callable=mock_callable,
            interval_seconds=60,
            shutdown_event=shutdown_event,
        )

        assert scheduler.interval_seconds == 60
        assert scheduler.cycle_callable == mock_callable
        assert not scheduler.is_running()

    def test_job_defaults_prevent_overlap(self):
        scheduler = SchedulerService(cycle_callable=Mock(), interval_seconds=60)

        assert scheduler.scheduler._job_defaults["max_instances"] == 1
        assert scheduler.scheduler._job_defaults["coalesce"] is True
        assert scheduler.scheduler._job_defaults["misfire_grace_time"] == 60

    def test_start_and_shutdown(self):
        shutdown_event = threading.Event()
        scheduler = SchedulerService(
            cycle_callable=Mock(),
            interval_seconds=300,
            shutdown_event=shutdown_event,
        )

        scheduler.start()
        assert scheduler.is_running()

        scheduler.shutdown(wait=True)
        assert not scheduler.is_running()
        assert shutdown_event.is_set()

    def test_first_cycle_runs_immediately(self):
        ran = threading.Event()
        scheduler = SchedulerService(cycle_callable=ran.set, interval_seconds=3600)

        scheduler.start()
        try:
            assert ran.wait(timeout=5)
        finally:
            scheduler.shutdown(wait=True)

    def test_cycles_do_not_overlap(self):
        active = []
        overlaps = []
        lock = threading.Lock()

        def slow_cycle():
            with lock:
                if active:
                    overlaps.append(True)
                active.append(True)
            time.sleep(1.5)
            with lock:
                active.pop()

        scheduler = SchedulerService(cycle_callable=slow_cycle, interval_seconds=1)
        scheduler.start()
        time.sleep(3)
        scheduler.shutdown(wait=True)

        assert overlaps == []

    def test_shutdown_waits_for_running_cycle(self):
        started = threading.Event()
        finished = threading.Event()

        def cycle():
            started.set()
            time.sleep(0.5)
            finished.set()

        scheduler = SchedulerService(cycle_callable=cycle, interval_seconds=3600)
        scheduler.start()
        assert started.wait(timeout=5)

        scheduler.shutdown(wait=True)

        assert finished.is_set()

    def test_trigger_now_returns_cycle_result(self):
        scheduler = SchedulerService(cycle_callable=Mock(return_value="result"))

        assert scheduler.trigger_now() == "result"
        assert not scheduler.is_running()

    def test_get_next_run_time(self):
        scheduler = SchedulerService(cycle_callable=Mock(), interval_seconds=60)

        assert scheduler.get_next_run_time() is None

        scheduler.start()
        try:
            assert isinstance(scheduler.get_next_run_time(), datetime)
        finally:
            scheduler.shutdown(wait=False)

    def test_shutdown_without_start(self):
        scheduler = SchedulerService(cycle_callable=Mock())

        scheduler.shutdown()

        assert not scheduler.is_running()
