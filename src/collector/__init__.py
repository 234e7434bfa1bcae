"""Callback-driven web collector."""

from .collector import Collector
from .context import Context
from .errors import BodyReadError, CollectorError, FetchError, InvalidURLError
from .http import HTMLElement, Request, Response

__version__ = "0.1.0"

__all__ = [
    "BodyReadError",
    "Collector",
    "CollectorError",
    "Context",
    "FetchError",
    "HTMLElement",
    "InvalidURLError",
    "Request",
    "Response",
]
