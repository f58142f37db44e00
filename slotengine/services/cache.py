"""
Bounded in-process cache with per-entry expiry.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """
    Key -> (value, stored-at) cache with TTL eviction and a size bound.

    Inserting beyond ``max_entries`` evicts the oldest entry. The cache is an
    explicit object handed to whoever needs it, never module-level state.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than zero")
        if max_entries <= 0:
            raise ValueError("max_entries must be greater than zero")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[V, float]]" = OrderedDict()

    def get(self, key: str) -> Optional[V]:
        """Return a live value, evicting it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None

        return value

    def set(self, key: str, value: V) -> None:
        if key in self._entries:
            del self._entries[key]

        self._entries[key] = (value, self._clock())

        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with ``prefix``; return how many."""
        stale = [key for key in self._entries if key.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None
