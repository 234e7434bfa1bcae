"""Shared fixtures."""

import asyncio
import weakref

import httpx
import pytest

from collector import Collector
from collector.config import CollectorSettings
from collector.context import Context
from collector.core import FetchResult
from collector.errors import FetchError
from collector.http import Request


class StubFetcher:
    """In-memory transport: maps URLs to (status, content_type, body) or an exception."""

    def __init__(self, pages: dict | None = None, delay: float = 0.0):
        self.pages = pages or {}
        self.delay = delay
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.cookies_disabled = False
        self.closed = False

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    async def fetch(self, url, headers):
        self.calls.append((url, dict(headers)))
        if self.delay:
            await asyncio.sleep(self.delay)

        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, "no such page")
        if isinstance(page, Exception):
            raise page

        status, content_type, body = page
        return FetchResult(
            url=url,
            status=status,
            content=body.encode("utf-8") if isinstance(body, str) else body,
            headers={"content-type": content_type},
        )

    def disable_cookies(self):
        self.cookies_disabled = True

    async def close(self):
        self.closed = True


def html_page(body: str, status: int = 200) -> tuple[int, str, str]:
    return status, "text/html; charset=utf-8", f"<html><body>{body}</body></html>"


@pytest.fixture
def settings():
    return CollectorSettings(user_agent="TestBot/1.0", max_depth=0)


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def collector(fetcher, settings):
    return Collector(fetcher=fetcher, settings=settings)


@pytest.fixture
def make_request(collector):
    def _make(url: str = "http://a.test/dir/page", depth: int = 1) -> Request:
        return Request(
            url=httpx.URL(url),
            headers=httpx.Headers({"User-Agent": collector.user_agent}),
            depth=depth,
            ctx=Context(),
            _collector=weakref.ref(collector),
        )
    return _make
