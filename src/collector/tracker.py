"""In-flight work accounting for the collector."""

import asyncio
from contextlib import contextmanager


class WorkTracker:
    """Counts fetches in progress and lets callers wait until none are left.

    Must only be used from the event loop that runs the fetches.
    """

    def __init__(self):
        self._count = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def count(self) -> int:
        """Number of fetches currently in progress."""
        return self._count

    def acquire(self):
        """Register one unit of work."""
        self._count += 1
        self._idle.clear()

    def release(self):
        """Mark one unit of work as finished."""
        if self._count == 0:
            raise RuntimeError("WorkTracker released more times than acquired")
        self._count -= 1
        if self._count == 0:
            self._idle.set()

    @contextmanager
    def track(self):
        """Hold one unit of work for the duration of the block."""
        self.acquire()
        try:
            yield
        finally:
            self.release()

    async def wait(self):
        """Block until no work is in progress."""
        # Work may start again between the event firing and this task resuming.
        while self._count:
            await self._idle.wait()
