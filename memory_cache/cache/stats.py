"""Hit/miss/eviction bookkeeping for the cache manager."""

from typing import Optional

from .entry import CacheStats
from .store import EntryStore


class StatsAccountant:
    """
    Running counters plus derived aggregates.

    Counters are cumulative for the lifetime of the accountant; only
    reset() zeroes them. Entry count and total size are never tracked
    here: snapshot() reads them from the store each time.
    """

    def __init__(self):
        self.hit_count = 0
        self.miss_count = 0
        self.eviction_count = 0
        self.hit_rate = 0.0
        self.last_snapshot: Optional[CacheStats] = None

    def record_hit(self) -> None:
        self.hit_count += 1

    def record_miss(self) -> None:
        self.miss_count += 1

    def record_evictions(self, count: int = 1) -> None:
        self.eviction_count += count

    def compute_hit_rate(self) -> float:
        """Recompute hit_rate from the counters; 0.0 before any lookup."""
        total = self.hit_count + self.miss_count
        self.hit_rate = self.hit_count / total if total > 0 else 0.0
        return self.hit_rate

    def snapshot(self, store: EntryStore) -> CacheStats:
        """
        Build a CacheStats from the counters and a fresh scan of store.

        The result is also kept as last_snapshot.
        """
        self.last_snapshot = CacheStats(
            hit_count=self.hit_count,
            miss_count=self.miss_count,
            hit_rate=self.compute_hit_rate(),
            entry_count=len(store),
            total_size_estimate=store.total_size(),
            eviction_count=self.eviction_count,
        )
        return self.last_snapshot

    def reset(self) -> None:
        """Zero all counters."""
        self.hit_count = 0
        self.miss_count = 0
        self.eviction_count = 0
        self.hit_rate = 0.0
        self.last_snapshot = None
