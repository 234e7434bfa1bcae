"""HTTP fetcher implementation using httpx."""

import asyncio
from collections.abc import Mapping
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx

from ..config import settings
from ..errors import BodyReadError, FetchError
from .protocols import FetchResult


class HttpFetcher:
    """Async HTTP fetcher using httpx with connection reuse and a cookie jar."""

    def __init__(
        self,
        timeout: float = settings.timeout,
        user_agent: str = settings.user_agent,
        max_connections: int = settings.max_connections,
        max_keepalive_connections: int = settings.max_keepalive_connections,
        follow_redirects: bool = settings.follow_redirects,
    ):
        self.timeout = httpx.Timeout(timeout)
        self.user_agent = user_agent
        self.follow_redirects = follow_redirects
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self.cookie_jar = CookieJar()
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with double-checked locking."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self.timeout,
                        limits=self.limits,
                        headers={"User-Agent": self.user_agent},
                        cookies=self.cookie_jar,
                        follow_redirects=self.follow_redirects,
                    )
        return self._client

    def disable_cookies(self):
        """Drop stored cookies and refuse to send or store any more."""
        self.cookie_jar.clear()
        # An empty allow-list blocks every domain for both directions.
        self.cookie_jar.set_policy(DefaultCookiePolicy(allowed_domains=[]))

    async def fetch(self, url: str, headers: Mapping[str, str]) -> FetchResult:
        """GET a URL and read the whole body.

        Raises:
            FetchError: the request could not be sent or no response arrived.
            BodyReadError: the response body could not be read.
        """
        client = await self._get_client()
        try:
            async with client.stream("GET", url, headers=dict(headers)) as resp:
                try:
                    content = await resp.aread()
                except httpx.HTTPError as e:
                    raise BodyReadError(url, str(e)) from e
                return FetchResult(
                    url=str(resp.url),
                    status=resp.status_code,
                    content=content,
                    headers=dict(resp.headers),
                )
        except BodyReadError:
            raise
        except httpx.HTTPError as e:
            raise FetchError(url, str(e)) from e

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
