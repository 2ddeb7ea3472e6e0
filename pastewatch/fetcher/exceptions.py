"""Exceptions raised by the paste fetcher."""


class FetchError(Exception):
    """Base exception for all fetch failures.

    Every fetch failure is operational: the poll loop reports it on the error
    route and moves on to the next paste or the next cycle.
    """


class FetchHTTPError(FetchError):
    """The upstream answered with a non-200 status, or the transport failed.

    ``status_code`` is 0 for transport failures (DNS, refused connection...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class FetchTimeoutError(FetchError):
    """The request did not complete within the total request timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class FetchResponseError(FetchError):
    """The response arrived but could not be decoded or validated."""


class FetchCancelledError(FetchError):
    """The request was aborted because shutdown was requested."""
