# src/currex/shared/cache.py
"""
Rate Cache - Time-boxed In-memory Cache

This module implements the TTL cache that sits in front of the rates API.
Entries are checked lazily on read: an expired entry behaves like a miss
and is overwritten by the next put. There is no background sweeping.

Files that USE this module:
- currex.adapters.providers.current_rates (CurrentRatesClient, 300s TTL)
- currex.adapters.providers.historical_rates (HistoricalRatesClient, 1800s TTL)
- currex.app (constructs one cache per client)

Files that this module USES:
- None (pure utility implementation)
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value with its creation instant and time-to-live (seconds)."""
    value: T
    created: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.created < self.ttl


class RateCache(Generic[T]):
    """
    Thread-safe in-memory cache with a fixed freshness window.

    Each key maps to an immutable CacheEntry that is swapped in under a lock,
    so readers never see a value paired with another write's timestamp.
    Concurrent puts for the same key are last-write-wins.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Freshness window; must be positive
            clock: Monotonic clock returning seconds (injectable for tests)
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        """
        Return the cached value for key, or None if absent or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.is_valid(self._clock()):
            return None
        return entry.value

    def put(self, key: str, value: T) -> None:
        """Store value under key with a fresh creation instant."""
        entry = CacheEntry(value=value, created=self._clock(), ttl=self.ttl)
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
