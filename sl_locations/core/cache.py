"""Bounded in-memory result cache with least-recently-used eviction."""
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Tuple
from sl_locations.core.config import CACHE_MAX_SIZE


@dataclass
class CacheEntry:
    """Cached value with the time it was last read or written."""
    value: Any
    last_access: float


class LRUCache:
    """
    Key/value store holding at most ``max_size`` entries.

    Inserting a new key into a full cache evicts exactly one entry, the one
    accessed least recently. A hit refreshes the entry's access time. There is
    no expiry.

    Entries are kept in access order, so eviction does not scan the store.
    """

    def __init__(self, max_size: int = CACHE_MAX_SIZE, clock: Callable[[], float] = time.monotonic):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries (must be at least 1)
            clock: Time source used for access timestamps
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Get a cached value, refreshing its recency; ``default`` on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return default
            entry.last_access = self._clock()
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any):
        """Store a value, evicting the least recently used entry when full."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
                self.evictions += 1
            self._entries[key] = CacheEntry(value=value, last_access=self._clock())

    def last_access(self, key: Hashable) -> Optional[float]:
        """Access time of a key without refreshing it."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.last_access if entry else None

    def keys(self) -> Tuple[Hashable, ...]:
        """Keys from least to most recently used."""
        with self._lock:
            return tuple(self._entries.keys())

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
