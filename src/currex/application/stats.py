# src/currex/application/stats.py
"""
Statistics Tracker - Track Fetch Activity

This module tracks statistics about rate fetching, including:
- Cache hits and misses
- Network fetches
- Errors by class
- Rate values that failed to parse and were replaced by 0.0

Files that USE this module:
- currex.adapters.providers.base (records hits, misses, fetches and errors)
- currex.adapters.providers.parser (records parse fallbacks)
- currex.app (creates the tracker and logs a summary)

Files that this module USES:
- None (in-memory only)
"""
from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class StatsTracker:
    """Thread-safe in-memory counters for the rates clients."""

    def __init__(self):
        self._lock = threading.Lock()
        self.start_time = datetime.now(timezone.utc)
        self._counts: Counter = Counter()
        self._errors: Counter = Counter()
        self._parse_fallbacks: Counter = Counter()
        self.last_error_time: Optional[datetime] = None

    def record_cache_hit(self, key: str) -> None:
        with self._lock:
            self._counts["cache_hits"] += 1

    def record_cache_miss(self, key: str) -> None:
        with self._lock:
            self._counts["cache_misses"] += 1

    def record_fetch(self, endpoint: str) -> None:
        with self._lock:
            self._counts["fetches"] += 1
            self._counts[f"fetches.{endpoint}"] += 1

    def record_error(self, error: BaseException) -> None:
        """
        Record a failed fetch.

        Args:
            error: The exception surfaced to the caller; errors carrying a
                ``code`` attribute are counted under that code
        """
        key = getattr(error, "code", type(error).__name__)
        with self._lock:
            self._errors[key] += 1
            self.last_error_time = datetime.now(timezone.utc)

    def record_parse_fallback(self, bank: str, field: str) -> None:
        with self._lock:
            self._parse_fallbacks[f"{bank}.{field}"] += 1

    @property
    def parse_fallbacks(self) -> int:
        with self._lock:
            return sum(self._parse_fallbacks.values())

    def summary(self) -> Dict[str, Any]:
        """
        Get a snapshot of all counters.

        Returns:
            Dictionary with counters, errors by code and parse fallbacks
        """
        with self._lock:
            return {
                "start_time": self.start_time.isoformat(),
                "cache_hits": self._counts["cache_hits"],
                "cache_misses": self._counts["cache_misses"],
                "fetches": self._counts["fetches"],
                "errors": dict(self._errors),
                "parse_fallbacks": dict(self._parse_fallbacks),
                "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None,
            }

    def log_summary(self) -> None:
        summary = self.summary()
        logger.info(
            "Fetch stats: fetches=%d hits=%d misses=%d errors=%s parse_fallbacks=%s",
            summary["fetches"],
            summary["cache_hits"],
            summary["cache_misses"],
            summary["errors"],
            summary["parse_fallbacks"],
        )
