"""Thread-safe in-memory cache whose entries expire after a fixed time."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

DEFAULT_TTL = 5 * 60.0


class ResponseCache:
    """Maps keys to values that are forgotten ``ttl`` seconds after being set."""

    def __init__(
        self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        expired = [key for key, (expires, _) in self._entries.items() if now >= expires]
        for key in expired:
            del self._entries[key]

    def get(self, key: str) -> Any:
        """Return the live value stored under ``key``, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires, value = entry
            if self._clock() >= expires:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` for the cache's time to live."""
        with self._lock:
            now = self._clock()
            self._purge(now)
            self._entries[key] = (now + self._ttl, value)

    def clear(self) -> None:
        """Forget every entry."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._entries)