"""Cache entry and statistics records."""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass
class CacheEntry:
    """
    One stored key.

    Timestamps come from the owning manager's clock (monotonic seconds
    by default).

    Attributes:
        value: The cached value, opaque to the cache
        expires_at: Clock time at or after which the entry is logically absent
        size_estimate: Approximate byte cost, computed once at insertion
        created_at: Clock time of insertion
        last_accessed_at: Clock time of insertion or of the latest hit
    """
    value: Any
    expires_at: float
    size_estimate: int
    created_at: float
    last_accessed_at: float

    def is_expired(self, now: float) -> bool:
        """Check whether the entry has expired at the given time."""
        return self.expires_at <= now

    def touch(self, now: float) -> None:
        """Record a successful read."""
        self.last_accessed_at = now


@dataclass(frozen=True)
class CacheStats:
    """
    Snapshot of cache statistics.

    Attributes:
        hit_count: Successful get() calls
        miss_count: get() calls on absent or expired keys
        hit_rate: hit_count / (hit_count + miss_count), 0.0 before any get()
        entry_count: Entries physically present in the store
        total_size_estimate: Sum of size estimates of those entries
        eviction_count: Entries removed by TTL expiry or capacity eviction
    """
    hit_count: int = 0
    miss_count: int = 0
    hit_rate: float = 0.0
    entry_count: int = 0
    total_size_estimate: int = 0
    eviction_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Return the snapshot as a JSON-serializable dictionary."""
        return asdict(self)
