"""Exceptions raised by the collector."""


class CollectorError(Exception):
    """Base class for collector errors."""


class InvalidURLError(CollectorError, ValueError):
    """A URL could not be parsed into an absolute URL."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        message = f"invalid URL {url!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FetchError(CollectorError):
    """The transport failed to fetch a URL."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        message = f"failed to fetch {url}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class BodyReadError(FetchError):
    """The response body could not be read."""
