"""
Cache Manager Module

This module implements the public cache contract: set, get, delete,
clear, get_stats and destroy. The manager owns the entry store, the
statistics counters and the two background maintenance timers.

Concurrency:
    Every access to the store or the counters, from callers and from the
    timers alike, happens under one re-entrant lock, so operations are
    mutually exclusive with each other and with maintenance passes.
"""

import logging
import math
import threading
import time
from typing import Any, Callable, Mapping, Optional, Union

from ..config.settings import CacheConfig
from .entry import CacheEntry, CacheStats
from .eviction import EvictionPolicy
from .scheduler import MaintenanceScheduler
from .sizing import SizeEstimator, estimate_size, safe_estimate
from .stats import StatsAccountant
from .store import EntryStore

logger = logging.getLogger(__name__)


class CacheManager:
    """
    In-memory key-value cache with TTL expiry, LRU capacity eviction and
    live statistics.

    Time Complexity:
    - set/get/delete: O(1) average, plus O(k) for k capacity evictions
    - clear, cleanup pass: O(n)

    Expiry:
        Every entry has a concrete TTL (explicit or config.default_ttl).
        Expired entries are removed lazily by get() and actively by the
        cleanup timer every config.check_interval seconds.

    Capacity:
        After every set() and on every cleanup tick, least recently used
        entries are evicted while the store exceeds config.max_entries
        entries or config.max_memory estimated bytes.

    Usage:
        cache = CacheManager({"maxEntries": 500, "defaultTTL": 60})
        cache.set("user:1", {"name": "alice"})
        cache.get("user:1")      # {'name': 'alice'}
        cache.get_stats().hit_rate
        cache.destroy()

    Attributes:
        config: The immutable CacheConfig in effect
    """

    def __init__(
            self,
            config: Union[CacheConfig, Mapping[str, Any], None] = None,
            size_estimator: SizeEstimator = estimate_size,
            clock: Callable[[], float] = time.monotonic,
            start_timers: bool = True,
    ):
        """
        Initialize the cache and start its maintenance timers.

        Args:
            config: CacheConfig, or an options mapping (missing options
                fall back to defaults)
            size_estimator: Function (key, value) -> estimated bytes
            clock: Time source in seconds; must be non-decreasing
            start_timers: Start the cleanup and stats timers immediately
        """
        if not isinstance(config, CacheConfig):
            config = CacheConfig.from_options(config)
        self.config = config

        self._size_estimator = size_estimator
        self._clock = clock
        self._lock = threading.RLock()
        self._store = EntryStore()
        self._stats = StatsAccountant()
        self._policy = EvictionPolicy(
            max_entries=config.max_entries,
            max_memory=config.max_memory,
        )
        self._scheduler = MaintenanceScheduler(
            cleanup=self.run_maintenance,
            cleanup_interval=config.check_interval,
            stats=self.refresh_stats,
            stats_interval=config.stats_interval,
        )
        self._destroyed = False

        if start_timers:
            self._scheduler.start()

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Insert or overwrite the entry for key.

        Args:
            key: The key to store
            value: Any value; it is not copied and should not be mutated
                after caching
            ttl: Time-to-live in seconds (None = config.default_ttl,
                0 = already expired)

        Raises:
            ValueError: If ttl is negative, infinite or NaN

        Capacity enforcement runs before returning, so the store never
        stays above its ceilings past the end of this call.
        """
        if ttl is None:
            ttl = self.config.default_ttl
        if not 0 <= ttl < math.inf:
            raise ValueError(f"ttl must be finite and non-negative, got {ttl!r}")

        size = safe_estimate(self._size_estimator, key, value)

        with self._lock:
            now = self._clock()
            self._store.put(key, CacheEntry(
                value=value,
                expires_at=now + ttl,
                size_estimate=size,
                created_at=now,
                last_accessed_at=now,
            ))
            self._enforce_capacity()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve the value for key.

        Args:
            key: The key to look up
            default: Returned when the key is absent or expired

        Returns:
            The cached value, or default

        Counts exactly one hit or one miss. An expired entry is removed
        on the spot and counted as an eviction.
        """
        with self._lock:
            entry = self._store.peek(key)
            if entry is None:
                self._stats.record_miss()
                return default

            now = self._clock()
            if entry.is_expired(now):
                # Lazy expiration
                self._store.pop(key)
                self._stats.record_evictions()
                self._stats.record_miss()
                return default

            self._store.touch(key, now)
            self._stats.record_hit()
            return entry.value

    def delete(self, key: str) -> bool:
        """
        Remove the entry for key.

        Returns:
            True if an entry was removed, False if key was absent
        """
        with self._lock:
            return self._store.pop(key) is not None

    def clear(self) -> None:
        """Remove all entries. Hit, miss and eviction counts are kept."""
        with self._lock:
            self._store.clear()

    def get_stats(self) -> CacheStats:
        """Return statistics recomputed from the live store."""
        with self._lock:
            return self._stats.snapshot(self._store)

    def reset_stats(self) -> None:
        """Zero the hit, miss and eviction counters."""
        with self._lock:
            self._stats.reset()

    @property
    def last_stats(self) -> Optional[CacheStats]:
        """Snapshot taken by the most recent stats tick or get_stats() call."""
        with self._lock:
            return self._stats.last_snapshot

    def refresh_stats(self) -> CacheStats:
        """Recompute derived statistics; run by the stats timer."""
        return self.get_stats()

    def run_maintenance(self) -> int:
        """
        Run one cleanup pass: TTL expiry, then capacity enforcement.

        Run by the cleanup timer; may also be called directly.

        Returns:
            Number of entries evicted
        """
        with self._lock:
            expired = self._policy.evict_expired(self._store, self._clock())
            self._stats.record_evictions(len(expired))
            evicted = self._enforce_capacity()

        return len(expired) + evicted

    def _enforce_capacity(self) -> int:
        evicted = self._policy.enforce_capacity(self._store)
        self._stats.record_evictions(len(evicted))
        return len(evicted)

    def destroy(self) -> None:
        """
        Stop both timers and release all entries.

        Idempotent. Timers are stopped before the lock is taken, so an
        in-flight maintenance tick finishes first. The manager remains
        usable afterwards, without background maintenance.
        """
        self._scheduler.stop()

        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True
            self._store.clear()

        logger.debug("Cache destroyed")

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def __contains__(self, key: object) -> bool:
        """Check logical presence without counting a hit or miss."""
        with self._lock:
            entry = self._store.peek(key)
            return entry is not None and not entry.is_expired(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __enter__(self) -> "CacheManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.destroy()
