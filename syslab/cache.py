"""A thread-safe, size-bounded least-recently-used object cache."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

MAX_CACHE_SIZE = 10970
MAX_OBJECT_SIZE = 10970

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """One cached object."""

    key: str
    value: bytes

    @property
    def size(self) -> int:
        return len(self.value)


class Cache:
    """Holds objects by key, evicting the least recently used when full."""

    def __init__(self, max_size: int = MAX_CACHE_SIZE) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._size = 0
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        """Total bytes held."""
        return self._size

    def find(self, key: str) -> CacheEntry | None:
        """Return the entry for key and mark it most recently used."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            self._entries.move_to_end(key, last=False)
            log.info("Cache hit!")
            return entry

    def insert(self, key: str, value: bytes) -> CacheEntry:
        """Store value under key as the most recently used entry."""
        entry = CacheEntry(key, bytes(value))
        with self._lock:
            old = self._entries.pop(key, None)
            if old is not None:
                self._size -= old.size
            if self._size + entry.size > self.max_size:
                self._evict(entry.size)
            self._entries[key] = entry
            self._entries.move_to_end(key, last=False)
            self._size += entry.size
        log.info("Cache miss!")
        return entry

    def evict(self, size: int) -> None:
        """Drop least recently used entries until size more bytes fit."""
        with self._lock:
            self._evict(size)

    def _evict(self, size: int) -> None:
        log.info("Evicting %d bytes", size)
        while self._size + size > self.max_size and self._entries:
            _, victim = self._entries.popitem(last=True)
            self._size -= victim.size
        log.info("Cache size: %d", self._size)

    def keys(self) -> list[str]:
        """Keys from most to least recently used."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries