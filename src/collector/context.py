"""Key/value store shared between a request and its response."""

import threading


class Context:
    """Thread-safe string store passed from a Request to its Response."""

    def __init__(self):
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: str):
        """Store value under key, replacing any previous value."""
        with self._lock:
            self._values[key] = value

    def get(self, key: str) -> str:
        """Return the value stored under key, or an empty string."""
        with self._lock:
            return self._values.get(key, "")

    def items(self) -> list[tuple[str, str]]:
        """Snapshot of all stored pairs."""
        with self._lock:
            return list(self._values.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __repr__(self) -> str:
        return f"Context({dict(self.items())!r})"
