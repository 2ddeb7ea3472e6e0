"""Upstream paste fetching.

    from pastewatch.fetcher import PastebinClient
    client = PastebinClient.from_config(app_config.scraper)
    items = client.list_items(cancel_event)
    body = client.fetch_body(items[0], cancel_event)
"""

from .client import PastebinClient
from .exceptions import (
    FetchCancelledError,
    FetchError,
    FetchHTTPError,
    FetchResponseError,
    FetchTimeoutError,
)

__all__ = [
    "PastebinClient",
    "FetchError",
    "FetchHTTPError",
    "FetchTimeoutError",
    "FetchResponseError",
    "FetchCancelledError",
]
