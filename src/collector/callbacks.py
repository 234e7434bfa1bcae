"""Callback registry and dispatch.

Three kinds of callback are supported:

- ``RequestCallback``: called with each Request before it is sent
- ``ResponseCallback``: called with each Response after HTML dispatch
- ``HTMLCallback``: called with an HTMLElement for every node that matches
  its CSS selector

Callbacks may be plain functions or coroutine functions.
"""

import inspect
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from .html import is_html, make_element, parse_document, select
from .http import HTMLElement, Request, Response

RequestHandler = Callable[[Request], Awaitable[None] | None]
ResponseHandler = Callable[[Response], Awaitable[None] | None]
HTMLHandler = Callable[[HTMLElement], Awaitable[None] | None]


@dataclass(frozen=True)
class RequestCallback:
    func: RequestHandler


@dataclass(frozen=True)
class ResponseCallback:
    func: ResponseHandler


@dataclass(frozen=True)
class HTMLCallback:
    selector: str
    func: HTMLHandler


Callback = RequestCallback | ResponseCallback | HTMLCallback


async def invoke(func: Callable[[Any], Any], arg: Any):
    """Call func with arg, awaiting the result if it is awaitable."""
    result = func(arg)
    if inspect.isawaitable(result):
        await result


class CallbackRegistry:
    """Holds registered callbacks and runs them for a fetch."""

    def __init__(self):
        self._request: list[RequestCallback] = []
        self._response: list[ResponseCallback] = []
        self._html: dict[str, HTMLCallback] = {}
        self._lock = threading.Lock()

    def register(self, callback: Callback):
        """Add a callback. A second HTMLCallback for a selector replaces the first."""
        with self._lock:
            if isinstance(callback, RequestCallback):
                self._request.append(callback)
            elif isinstance(callback, ResponseCallback):
                self._response.append(callback)
            elif isinstance(callback, HTMLCallback):
                self._html[callback.selector] = callback
            else:
                raise TypeError(f"unsupported callback type: {type(callback).__name__}")

    def request_callbacks(self) -> list[RequestCallback]:
        with self._lock:
            return list(self._request)

    def response_callbacks(self) -> list[ResponseCallback]:
        with self._lock:
            return list(self._response)

    def html_callbacks(self) -> list[HTMLCallback]:
        with self._lock:
            return list(self._html.values())

    async def dispatch_request(self, request: Request):
        """Run request callbacks in registration order."""
        callbacks = self.request_callbacks()
        if not callbacks:
            return
        for callback in callbacks:
            await invoke(callback.func, request)

    async def dispatch_response(self, response: Response):
        """Run response callbacks in registration order."""
        callbacks = self.response_callbacks()
        if not callbacks:
            return
        for callback in callbacks:
            await invoke(callback.func, response)

    async def dispatch_html(self, response: Response, content_type: str):
        """Run HTML callbacks for every matching node of an HTML response."""
        if not is_html(content_type):
            return
        callbacks = self.html_callbacks()
        if not callbacks:
            return

        tree = parse_document(response.body)
        if tree is None:
            return

        for callback in callbacks:
            for node in select(tree, callback.selector):
                element = make_element(node, response.request, response)
                await invoke(callback.func, element)
