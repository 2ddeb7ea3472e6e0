"""HTTP client for the Pastebin scraping API.

Two endpoints are used:
- the list endpoint returns the most recent pastes as a JSON array of records
- the item endpoint returns the raw body of one paste

Each request runs on its own thread while the caller watches the wall clock
and the cancel event, so neither a trickling upstream nor a stalled connect
can hold a caller past the total request timeout.
"""

import codecs
import json
import logging
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from pastewatch.domain.models import PasteItem
from pastewatch.logging import get_logger

from .exceptions import (
    FetchCancelledError,
    FetchError,
    FetchHTTPError,
    FetchResponseError,
    FetchTimeoutError,
)

logger = get_logger(__name__, component="fetcher")

CHUNK_SIZE = 16 * 1024
WAIT_INTERVAL = 0.05


class PastebinClient:
    """Fetches the paste list and individual paste bodies.

    One instance (and its requests.Session) is shared by the whole process;
    it holds no per-request state.

    Attributes:
        list_url: Scraping list endpoint
        item_url: Raw paste endpoint
        timeout: Total time allowed per call, in seconds
        list_limit: Number of pastes requested per list call
    """

    def __init__(
        self,
        list_url: str,
        item_url: str,
        timeout: float = 10,
        user_agent: str = "pastewatch/1.0",
        list_limit: int = 100,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.list_url = list_url
        self.item_url = item_url
        self.timeout = timeout
        self.list_limit = list_limit

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, scraper_config) -> "PastebinClient":
        """Build a client from a ScraperConfig."""
        return cls(
            list_url=scraper_config.list_url,
            item_url=scraper_config.item_url,
            timeout=scraper_config.http_request_timeout,
            user_agent=scraper_config.user_agent,
            list_limit=scraper_config.list_limit,
        )

    def list_items(self, cancel_event: Optional[threading.Event] = None) -> List[PasteItem]:
        """Fetch the current paste list.

        Returns:
            PasteItems in upstream order. Records without a key are skipped.

        Raises:
            FetchError: On transport, status, timeout, cancellation or decode failure
        """
        text = self._get(self.list_url, {"limit": self.list_limit}, cancel_event)

        try:
            records = json.loads(text)
        except ValueError as e:
            # Non-whitelisted IPs get a plain-text notice instead of JSON
            snippet = text.strip()[:120]
            raise FetchResponseError(
                f"Failed to decode paste list from {self.list_url}: {e} ({snippet!r})"
            ) from e

        if not isinstance(records, list):
            raise FetchResponseError(
                f"Expected JSON array from {self.list_url}, got {type(records).__name__}"
            )

        items = []
        for record in records:
            item = self._to_item(record)
            if item is not None:
                items.append(item)

        logger.debug(
            f"Listed {len(items)} pastes",
            extra={"event": "fetcher.list.succeeded", "count": len(items)},
        )
        return items

    def fetch_body(self, item: PasteItem, cancel_event: Optional[threading.Event] = None) -> str:
        """Fetch the raw body of one paste.

        Raises:
            FetchError: On transport, status, timeout or cancellation failure
        """
        return self._get(self.item_url, {"i": item.key}, cancel_event)

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def _to_item(record: Any) -> Optional[PasteItem]:
        if not isinstance(record, dict) or not record.get("key"):
            logger.warning(
                "Skipping paste list record without key",
                extra={"event": "fetcher.list.bad_record", "record": str(record)[:200]},
            )
            return None
        return PasteItem(key=str(record["key"]), metadata=record)

    def _get(
        self,
        url: str,
        params: Dict[str, Any],
        cancel_event: Optional[threading.Event],
    ) -> str:
        """GET ``url`` and return the decoded body.

        The whole call, body download included, must finish within
        ``self.timeout`` seconds of wall-clock time. The transfer runs on its
        own thread; on timeout or cancellation this method returns at once and
        leaves the thread to wind down in the background.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise FetchCancelledError(f"Request to {url} cancelled before start")

        logger.debug(
            f"HTTP GET {url}",
            extra={"event": "fetcher.request", "url": url, "params": params},
        )

        transfer = _Transfer(self._session, url, params, self.timeout, cancel_event)
        deadline = time.monotonic() + self.timeout
        transfer.start()

        while not transfer.done.wait(WAIT_INTERVAL):
            if cancel_event is not None and cancel_event.is_set():
                transfer.abandon()
                raise FetchCancelledError(f"Request to {url} cancelled")
            if time.monotonic() >= deadline:
                transfer.abandon()
                logger.warning(
                    f"Request to {url} exceeded {self.timeout} seconds",
                    extra={"event": "fetcher.request.deadline", "url": url},
                )
                raise FetchTimeoutError(
                    f"Request to {url} exceeded {self.timeout} seconds", url=url
                )

        if transfer.error is not None:
            self._raise_transfer_error(transfer.error, url)

        if transfer.status_code != 200:
            log_level = logging.WARNING if transfer.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {transfer.status_code} from {url}",
                extra={
                    "event": "fetcher.request.error",
                    "status_code": transfer.status_code,
                    "url": url,
                },
            )
            raise FetchHTTPError(
                f"HTTP {transfer.status_code}: {transfer.reason} ({url})",
                status_code=transfer.status_code,
                url=url,
            )

        return transfer.content.decode(transfer.encoding, errors="replace")

    def _raise_transfer_error(self, error: Exception, url: str) -> None:
        if isinstance(error, FetchError):
            raise error
        if isinstance(error, requests.exceptions.Timeout):
            raise FetchTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from error
        if isinstance(error, requests.exceptions.RequestException):
            raise FetchHTTPError(
                f"Request to {url} failed: {error}", status_code=0, url=url
            ) from error
        raise error


class _Transfer:
    """One streamed GET running on a daemon thread.

    The caller waits on ``done``. If it gives up first it calls abandon(), and
    the thread stops at the next chunk boundary (or when the socket read
    timeout fires) and closes its response.
    """

    def __init__(
        self,
        session: requests.Session,
        url: str,
        params: Dict[str, Any],
        timeout: float,
        cancel_event: Optional[threading.Event],
    ) -> None:
        self.url = url
        self.done = threading.Event()
        self.status_code = 0
        self.reason = ""
        self.encoding = "utf-8"
        self.content = b""
        self.error: Optional[Exception] = None

        self._session = session
        self._params = params
        self._timeout = timeout
        self._cancel_event = cancel_event
        self._abandoned = threading.Event()
        self._thread = threading.Thread(target=self._run, name="pastebin-fetch", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def abandon(self) -> None:
        self._abandoned.set()

    def _stopped(self) -> bool:
        if self._abandoned.is_set():
            return True
        return self._cancel_event is not None and self._cancel_event.is_set()

    def _run(self) -> None:
        try:
            with self._session.get(
                self.url, params=self._params, timeout=self._timeout, stream=True
            ) as response:
                self.status_code = response.status_code
                self.reason = response.reason
                if response.status_code != 200:
                    return

                self.encoding = _encoding(response)
                chunks = []
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if self._stopped():
                        raise FetchCancelledError(f"Request to {self.url} cancelled")
                    chunks.append(chunk)
                self.content = b"".join(chunks)
        except Exception as e:
            # Handed back to the waiting caller, which maps it to a FetchError
            self.error = e
        finally:
            self.done.set()


def _encoding(response: requests.Response) -> str:
    """Declared charset if Python knows it, utf-8 otherwise."""
    content_type = response.headers.get("Content-Type", "").lower()
    if "charset=" not in content_type or not response.encoding:
        return "utf-8"
    try:
        return codecs.lookup(response.encoding).name
    except LookupError:
        logger.warning(
            f"Unknown charset {response.encoding!r}, decoding as utf-8",
            extra={"event": "fetcher.charset.unknown", "charset": response.encoding},
        )
        return "utf-8"
