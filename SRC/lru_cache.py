
"""Bounded LRU memo for key -> node lookups.
Cleared on topology rebuilds; patched in place on swaps.
"""
from __future__ import annotations

from typing import Iterator, Optional, Tuple
from collections import OrderedDict
import threading

DEFAULT_MAX_SIZE = 5000


class LRUCache:
    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._lock = threading.Lock()
        self._store: OrderedDict[str, str] = OrderedDict()

    def _evict_if_needed(self) -> None:
        while len(self._store) > self.max_size:
            self._store.popitem(last=False)

    def get(self, k: str) -> Optional[str]:
        with self._lock:
            val = self._store.get(k)
            if val is None:
                return None
            self._store.move_to_end(k, last=True)
            return val

    def set(self, k: str, v: str) -> None:
        with self._lock:
            self._store[k] = v
            self._store.move_to_end(k, last=True)
            self._evict_if_needed()

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def update_matching(self, old: str, new: str) -> int:
        """Rewrite every entry whose value is ``old``; recency is left alone."""
        with self._lock:
            hits = [k for k, v in self._store.items() if v == old]
            for k in hits:
                self._store[k] = new
            return len(hits)

    def items(self) -> Iterator[Tuple[str, str]]:
        with self._lock:
            return iter(list(self._store.items()))

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, k: object) -> bool:
        return k in self._store
