"""Request, Response and HTMLElement passed to collector callbacks."""

from __future__ import annotations

import asyncio
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from .context import Context
from .urls import absolute_url

if TYPE_CHECKING:
    from .collector import Collector


@dataclass(frozen=True, eq=False)
class Request:
    """A planned or in-flight GET made by a Collector.

    Callbacks may change ``headers`` and ``ctx`` before the request is sent.
    """

    url: httpx.URL
    headers: httpx.Headers
    depth: int
    ctx: Context
    _collector: weakref.ReferenceType[Collector] = field(repr=False)

    def absolute_url(self, url: str) -> str:
        """Resolve url against this request's URL (see ``urls.absolute_url``)."""
        return absolute_url(str(self.url), url)

    def _get_collector(self) -> Collector:
        collector = self._collector()
        if collector is None:
            raise RuntimeError("the Collector that made this request no longer exists")
        return collector

    async def visit(self, url: str):
        """Fetch url, resolved against this request, one level deeper."""
        await self._get_collector()._scrape(self.absolute_url(url), self.depth + 1)

    def spawn(self, url: str) -> asyncio.Task:
        """Like ``visit`` but runs in a background task tracked by ``Collector.wait``."""
        return self._get_collector().spawn(self.absolute_url(url), self.depth + 1)


@dataclass(frozen=True, eq=False)
class Response:
    """A completed fetch."""

    status_code: int
    body: bytes
    request: Request
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @property
    def ctx(self) -> Context:
        """Context shared with the originating request."""
        return self.request.ctx

    @property
    def text(self) -> str:
        """Decode body as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True, eq=False)
class HTMLElement:
    """One node of an HTML document matched by a selector."""

    name: str
    attributes: tuple[tuple[str, str], ...]
    request: Request
    response: Response
    text: str = ""

    def attr(self, key: str) -> str:
        """Return the value of attribute key, or an empty string."""
        for name, value in self.attributes:
            if name == key:
                return value
        return ""
