"""
History cache.

Holds recently read reaction histories keyed by 'TargetKey.key' so repeated
crispness reads for the same totem do not hit the store. The cache is an
ordinary object owned by whoever builds the controller; there are no
module-level instances. Writers must call 'invalidate' after every save.
"""

import time
from collections.abc import Callable
from threading import Lock

from totem_toolkit.reactions.database import StoredHistory


class HistoryCache:
    """Thread-safe in-memory cache with an optional TTL (seconds, 0 = no expiry)."""

    def __init__(self, ttl_seconds: float = 60, timer: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._timer = timer
        self._entries: dict[str, tuple[StoredHistory, float]] = {}
        self._lock = Lock()

    def get(self, key: str) -> StoredHistory | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored, expiry = entry
            if self.ttl_seconds and self._timer() >= expiry:
                del self._entries[key]
                return None
            return stored

    def set(self, key: str, stored: StoredHistory) -> None:
        with self._lock:
            self._entries[key] = (stored, self._timer() + self.ttl_seconds)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
