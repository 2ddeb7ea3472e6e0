"""The poll loop: list, fetch, match and dedup one cycle at a time."""

import threading
from datetime import datetime
from typing import Any, Callable, List, Optional
from uuid import uuid4

from pastewatch.domain.models import ErrorStage, MatchedPaste, OperationalError, PasteItem
from pastewatch.fetcher.client import PastebinClient
from pastewatch.fetcher.exceptions import FetchError
from pastewatch.logging import get_logger
from pastewatch.logging.context import log_context
from pastewatch.matching.engine import KeywordMatcher
from pastewatch.utils.timestamps import utc_now

from .dedup import DedupCache
from .models import CycleResult, PollState
from .routes import DeliveryRoute

logger = get_logger(__name__, component="poller")


class PollLoop:
    """
    Runs poll cycles against the upstream paste list.

    Each call to run_cycle() is one pass through LISTING, PROCESSING and
    EXPIRING. The scheduler provides the IDLE wait between passes.

    The loop owns the dedup cache outright. Its only outputs are the two
    delivery routes: matches go to ``output_route`` and failures to
    ``error_route``.

    Shutdown is cooperative. ``terminate_event`` is checked before a cycle
    starts and before each paste, so a paste already being fetched is
    finished but nothing new is started. ``cancel_event`` is handed to the
    HTTP client to abort in-flight requests and also cuts the per-paste delay
    short.
    """

    def __init__(
        self,
        client: PastebinClient,
        matcher: KeywordMatcher,
        cache: DedupCache,
        output_route: DeliveryRoute,
        error_route: DeliveryRoute,
        terminate_event: threading.Event,
        cancel_event: threading.Event,
        item_delay: float = 1.0,
        clock: Callable[[], datetime] = utc_now,
        sleeper: Optional[Callable[[float], Any]] = None,
    ):
        """
        Initialize the poll loop.

        Args:
            client: Upstream client shared by every cycle
            matcher: Keyword matcher built from the compiled patterns
            cache: Dedup cache owned by this loop
            output_route: Route for MatchedPaste results
            error_route: Route for OperationalError reports
            terminate_event: Set once shutdown is requested
            cancel_event: Set once in-flight network calls should abort
            item_delay: Seconds to wait after every fetch attempt
            clock: Source of "now" for the dedup cache
            sleeper: Waits the per-paste delay (defaults to cancel_event.wait)
        """
        self.client = client
        self.matcher = matcher
        self.cache = cache
        self.output_route = output_route
        self.error_route = error_route
        self.terminate_event = terminate_event
        self.cancel_event = cancel_event
        self.item_delay = item_delay
        self.clock = clock
        self.sleeper = sleeper or cancel_event.wait
        self.state = PollState.IDLE
        self._lock = threading.Lock()

    @property
    def terminating(self) -> bool:
        return self.terminate_event.is_set()

    def run_cycle(self) -> CycleResult:
        """
        Execute one poll cycle.

        Returns:
            CycleResult with the cycle's counters
        """
        cycle_id = uuid4().hex[:12]
        result = CycleResult(cycle_id=cycle_id, started_at=self.clock())

        if self.terminating:
            self.state = PollState.STOPPED
            result.stopped = True
            result.finished_at = result.started_at
            logger.debug(
                "Termination requested, not starting a new cycle",
                extra={"event": "poll.cycle.not_started", "cycle_id": cycle_id},
            )
            return result

        if not self._lock.acquire(blocking=False):
            logger.warning(
                "Poll cycle skipped: previous cycle still in progress",
                extra={"event": "poll.cycle.rejected", "cycle_id": cycle_id},
            )
            result.rejected = True
            result.finished_at = self.clock()
            return result

        try:
            with log_context(cycle_id=cycle_id):
                logger.debug("Poll cycle started", extra={"event": "poll.cycle.started"})

                items = self._list(result)
                self._process(items, result)
                self._expire(result)

                result.finished_at = self.clock()
                result.stopped = self.terminating
                self.state = PollState.STOPPED if result.stopped else PollState.IDLE

                logger.info(
                    f"Poll cycle completed: {result.listed} listed, {result.skipped} skipped, "
                    f"{result.fetched} fetched, {result.matched} matched, {result.errors} errors",
                    extra={
                        "event": "poll.cycle.completed",
                        "duration_ms": int(result.duration_seconds * 1000),
                        "listed": result.listed,
                        "skipped": result.skipped,
                        "fetched": result.fetched,
                        "matched": result.matched,
                        "errors": result.errors,
                        "expired": result.expired,
                        "cache_size": len(self.cache),
                        "stopped": result.stopped,
                    },
                )
                return result
        finally:
            self._lock.release()

    def _list(self, result: CycleResult) -> List[PasteItem]:
        self.state = PollState.LISTING
        try:
            items = self.client.list_items(self.cancel_event)
        except FetchError as e:
            result.list_failed = True
            self._report(result, OperationalError.from_exception(ErrorStage.LIST_FETCH, e))
            return []
        except Exception as e:
            logger.error(
                f"Unexpected error listing pastes: {e}",
                extra={"event": "poll.list.unexpected"},
                exc_info=True,
            )
            result.list_failed = True
            self._report(result, OperationalError.from_exception(ErrorStage.LIST_FETCH, e))
            return []

        result.listed = len(items)
        return items

    def _process(self, items: List[PasteItem], result: CycleResult) -> None:
        self.state = PollState.PROCESSING
        for item in items:
            if self.terminating:
                logger.info(
                    "Termination requested, leaving remaining pastes unprocessed",
                    extra={"event": "poll.cycle.interrupted"},
                )
                break

            if self.cache.seen(item.key):
                result.skipped += 1
                logger.debug(
                    f"Skipping paste {item.key}: already checked",
                    extra={"event": "poll.item.skipped", "paste_key": item.key},
                )
                continue

            with log_context(paste_key=item.key):
                self._process_item(item, result)

            logger.debug(
                f"Sleeping {self.item_delay}s before next paste",
                extra={"event": "poll.item.delay"},
            )
            self.sleeper(self.item_delay)

    def _process_item(self, item: PasteItem, result: CycleResult) -> None:
        """Fetch and evaluate one paste. The key is marked seen whatever the outcome."""
        try:
            body = self.client.fetch_body(item, self.cancel_event)
        except FetchError as e:
            self._report(
                result, OperationalError.from_exception(ErrorStage.ITEM_FETCH, e, item.key)
            )
            return
        except Exception as e:
            logger.error(
                f"Unexpected error fetching paste {item.key}: {e}",
                extra={"event": "poll.item.unexpected"},
                exc_info=True,
            )
            self._report(
                result, OperationalError.from_exception(ErrorStage.ITEM_FETCH, e, item.key)
            )
            return
        finally:
            self.cache.mark_seen(item.key, self.clock())

        result.fetched += 1
        match = self.matcher.evaluate(body)
        if not match.matched:
            return

        result.matched += 1
        logger.info(
            f"Paste {item.key} matched: {', '.join(match.keywords)}",
            extra={"event": "poll.item.matched", "keywords": match.keywords},
        )
        self.output_route.put(MatchedPaste(item=item, body=body, hits=match.hits))

    def _expire(self, result: CycleResult) -> None:
        self.state = PollState.EXPIRING
        result.expired = self.cache.expire(self.clock())
        if result.expired:
            logger.debug(
                f"Expired {result.expired} dedup entries",
                extra={"event": "poll.cache.expired", "expired": result.expired},
            )

    def _report(self, result: CycleResult, error: OperationalError) -> None:
        result.errors += 1
        # The error worker logs it at ERROR
        logger.debug(
            f"Routing operational error: {error}",
            extra={
                "event": "poll.error",
                "stage": error.stage.value,
                "error_type": error.error_type,
            },
        )
        self.error_route.put(error)
