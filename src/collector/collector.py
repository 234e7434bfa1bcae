"""Collector: fetch pages and dispatch callbacks."""

import asyncio
import logging
import weakref

import httpx

from .callbacks import (
    CallbackRegistry,
    HTMLCallback,
    HTMLHandler,
    RequestCallback,
    RequestHandler,
    ResponseCallback,
    ResponseHandler,
)
from .config import CollectorSettings
from .config import settings as default_settings
from .context import Context
from .core import Fetcher, HttpFetcher
from .errors import InvalidURLError
from .http import Request, Response
from .tracker import WorkTracker
from .visited import VisitedURLs

logger = logging.getLogger(__name__)


class Collector:
    """Crawl engine.

    A Collector fetches URLs passed to ``visit`` and runs the registered
    callbacks for each of them. Callbacks introduce new work through
    ``Request.visit`` (inline) or ``Request.spawn`` (background task). Every
    URL is fetched at most once per Collector, and when ``max_depth`` is
    positive URLs deeper than it are skipped.

    Example:
        collector = Collector(max_depth=2)

        @collector.on_html("a[href]")
        def follow(element):
            element.request.spawn(element.attr("href"))

        await collector.visit("https://example.com/")
        await collector.wait()
    """

    def __init__(
        self,
        user_agent: str | None = None,
        max_depth: int | None = None,
        fetcher: Fetcher | None = None,
        settings: CollectorSettings | None = None,
    ):
        self.settings = settings or default_settings
        self._fetcher_override = fetcher
        self.fetcher: Fetcher | None = None
        # Outlive init(): tasks spawned before a reset keep running to completion.
        self._tasks: set[asyncio.Task] = set()
        self._closing: set[asyncio.Task] = set()
        self.init()
        if user_agent is not None:
            self.user_agent = user_agent
        if max_depth is not None:
            self.max_depth = max_depth

    def init(self):
        """Reset the collector to its default configuration and empty state.

        A transport created by a previous ``init`` is closed; inside an event
        loop the close runs in the background and ``close`` awaits it.
        """
        self._discard_fetcher()
        self.user_agent = self.settings.user_agent
        self.max_depth = self.settings.max_depth
        self.fetcher = self._fetcher_override or HttpFetcher(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
            max_connections=self.settings.max_connections,
            max_keepalive_connections=self.settings.max_keepalive_connections,
            follow_redirects=self.settings.follow_redirects,
        )
        self._visited = VisitedURLs()
        self._callbacks = CallbackRegistry()
        self._tracker = WorkTracker()

    def _discard_fetcher(self):
        old = self.fetcher
        if old is None or old is self._fetcher_override:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(old.close())
            return
        task = loop.create_task(old.close())
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    @property
    def visited_urls(self) -> frozenset[str]:
        """URLs this collector has started fetching."""
        return self._visited.snapshot()

    @property
    def in_flight(self) -> int:
        """Number of fetches in progress."""
        return self._tracker.count

    async def visit(self, url: str):
        """Fetch url at depth 1 and run callbacks for it.

        Empty, already visited and too deep URLs are skipped without error.

        Raises:
            InvalidURLError: url is not a valid absolute URL.
            FetchError: the transport failed.
            BodyReadError: the response body could not be read.
        """
        await self._scrape(url, 1)

    def spawn(self, url: str, depth: int = 1) -> asyncio.Task:
        """Fetch url at depth in a background task.

        The task counts as in-flight from this call on, so ``wait`` covers it.
        """
        tracker = self._tracker
        tracker.acquire()
        task = asyncio.create_task(self._run_spawned(url, depth, tracker))
        self._tasks.add(task)
        task.add_done_callback(self._spawned_done)
        return task

    async def _run_spawned(self, url: str, depth: int, tracker: WorkTracker):
        # Release the tracker acquired in spawn(), even if init() replaced it since.
        try:
            await self._scrape(url, depth)
        finally:
            tracker.release()

    def _spawned_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background fetch failed: %s", exc)

    async def _scrape(self, url: str, depth: int):
        with self._tracker.track():
            if not url:
                return
            if self.max_depth > 0 and depth > self.max_depth:
                logger.debug("Skipping %s: depth %d exceeds %d", url, depth, self.max_depth)
                return
            if not self._visited.reserve(url):
                logger.debug("Skipping %s: already visited", url)
                return

            try:
                parsed = httpx.URL(url)
            except httpx.InvalidURL as e:
                raise InvalidURLError(url, str(e)) from e
            if not parsed.is_absolute_url:
                raise InvalidURLError(url, "not an absolute URL")

            request = Request(
                url=parsed,
                headers=httpx.Headers({"User-Agent": self.user_agent}),
                depth=depth,
                ctx=Context(),
                _collector=weakref.ref(self),
            )
            await self._callbacks.dispatch_request(request)

            logger.debug("Fetching %s (depth %d)", url, depth)
            result = await self.fetcher.fetch(str(request.url), request.headers)

            response = Response(
                status_code=result.status,
                body=result.content,
                request=request,
                headers=httpx.Headers(result.headers),
            )
            await self._callbacks.dispatch_html(response, result.content_type)
            await self._callbacks.dispatch_response(response)

    def on_request(self, callback: RequestHandler) -> RequestHandler:
        """Register a callback run before every request. Usable as a decorator."""
        self._callbacks.register(RequestCallback(callback))
        return callback

    def on_response(self, callback: ResponseHandler) -> ResponseHandler:
        """Register a callback run after every response. Usable as a decorator."""
        self._callbacks.register(ResponseCallback(callback))
        return callback

    def on_html(self, selector: str, callback: HTMLHandler | None = None):
        """Register a callback for every HTML element matching selector.

        Registering a selector again replaces its previous callback. Without
        a callback, returns a decorator.
        """
        if callback is None:
            def decorator(func: HTMLHandler) -> HTMLHandler:
                self._callbacks.register(HTMLCallback(selector, func))
                return func
            return decorator

        self._callbacks.register(HTMLCallback(selector, callback))
        return callback

    def disable_cookies(self):
        """Stop sending and storing cookies for future requests."""
        self.fetcher.disable_cookies()

    async def wait(self):
        """Return once every fetch, including spawned ones, has finished."""
        await self._tracker.wait()

    async def close(self):
        """Close the transport, including ones left over from earlier ``init`` calls."""
        if self._closing:
            await asyncio.gather(*self._closing)
        await self.fetcher.close()

    async def __aenter__(self) -> "Collector":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
