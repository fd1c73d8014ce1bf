"""
In-memory cache with TTL support

Holds reference data and legacy-source reads for a single application
instance. Callers invalidate explicitly after writes; entries also expire
after their TTL.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from busstation.logger import get_logger

logger = get_logger("bus_station.cache")

_MISSING = object()


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """
    Thread-safe key/value cache with per-entry expiry.

    Args:
        default_ttl: Seconds an entry lives when set() is called without a ttl
        clock: Callable returning monotonic seconds (injectable for tests)
    """

    # TTL presets (seconds)
    TTL = {
        'SHORT': 30,    # frequently changing data (dispatch)
        'MEDIUM': 120,  # moderately changing data (service catalog)
        'LONG': 300,    # rarely changing data (vehicles, routes)
        'STATIC': 600,  # static data
    }

    def __init__(self, default_ttl: float = 60, clock: Optional[Callable[[], float]] = None):
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default when missing or expired"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return default
            return entry.value

    def contains(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def get_or_set(self, key: str, getter: Callable[[], Any], ttl: Optional[float] = None) -> Any:
        """
        Return the cached value or compute it with getter and cache the result.

        The getter runs outside the lock; concurrent misses may both fetch.
        Exceptions from the getter propagate and nothing is cached.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value
        value = getter()
        self.set(key, value, ttl)
        return value

    def refresh(self, key: str, getter: Callable[[], Any], ttl: Optional[float] = None) -> Any:
        """Always re-fetch with getter and replace the cached value"""
        value = getter()
        self.set(key, value, ttl)
        logger.debug(f"Cache refreshed: {key}")
        return value

    def invalidate(self, key: Optional[str] = None) -> int:
        """
        Drop one key, or every key when key is None.

        Returns:
            int: Number of entries removed
        """
        with self._lock:
            if key is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                removed = 1 if self._entries.pop(key, None) is not None else 0
        if removed:
            logger.debug(f"Cache invalidated: {key or '*'} ({removed} entries)")
        return removed

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
        return len(keys)

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if now < entry.expires_at)


def get_app_cache() -> TTLCache:
    """Return the cache owned by the current Flask application"""
    from flask import current_app
    return current_app.extensions['busstation_cache']
