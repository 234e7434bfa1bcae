"""Protocol definitions for collector components."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol


@dataclass
class FetchResult:
    """Raw HTTP response as returned by a transport."""

    url: str
    status: int
    content: bytes
    headers: dict[str, str]

    @property
    def content_type(self) -> str:
        """Declared content type, or an empty string."""
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""


class Fetcher(Protocol):
    """Protocol for transports used by the Collector."""

    async def fetch(self, url: str, headers: Mapping[str, str]) -> FetchResult:
        """GET a URL with the given headers and read the full body."""
        ...

    def disable_cookies(self) -> None:
        """Stop sending and storing cookies."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
