"""
Entry Store Module

This module implements the key -> CacheEntry mapping behind the cache
manager. It keeps no policy of its own: expiry, capacity and statistics
are decided by the manager and the eviction policy.
"""

from collections import OrderedDict
from typing import Iterator, Optional, Tuple

from .entry import CacheEntry


class EntryStore:
    """
    Recency-ordered mapping from key to CacheEntry.

    Provides O(1) average-case time complexity for:
    - put: Insert or replace an entry (becomes most recently used)
    - peek: Look up an entry without changing recency
    - touch: Mark an entry as most recently used
    - pop: Remove an entry

    Internal Storage:
        Uses OrderedDict, least recently used first. An entry moves to the
        end when it is inserted, replaced or touched, so iteration order is
        ascending last_accessed_at with insertion order breaking ties.

    The store also keeps a running total of size estimates so capacity
    checks stay O(1); total_size() rescans when an exact figure is needed.
    """

    def __init__(self):
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._total_size = 0

    def put(self, key: str, entry: CacheEntry) -> Optional[CacheEntry]:
        """
        Insert or replace the entry for key.

        Returns:
            The replaced entry, or None if the key was new
        """
        previous = self._entries.pop(key, None)
        if previous is not None:
            self._total_size -= previous.size_estimate

        self._entries[key] = entry
        self._total_size += entry.size_estimate
        return previous

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Get the entry for key without updating recency."""
        return self._entries.get(key)

    def touch(self, key: str, now: float) -> None:
        """Mark key as most recently used at time now."""
        entry = self._entries[key]
        entry.touch(now)
        self._entries.move_to_end(key)

    def pop(self, key: str) -> Optional[CacheEntry]:
        """
        Remove the entry for key.

        Returns:
            The removed entry, or None if key was absent
        """
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._total_size -= entry.size_estimate
        return entry

    def pop_lru(self) -> Optional[Tuple[str, CacheEntry]]:
        """
        Remove the least recently used entry.

        Returns:
            Tuple of (key, entry), or None if the store is empty
        """
        if not self._entries:
            return None
        key, entry = self._entries.popitem(last=False)
        self._total_size -= entry.size_estimate
        return key, entry

    def lru_key(self) -> Optional[str]:
        """Get the least recently used key without removing it."""
        if not self._entries:
            return None
        return next(iter(self._entries))

    def expired_keys(self, now: float) -> list:
        """List keys whose entries have expired at time now."""
        return [k for k, e in self._entries.items() if e.is_expired(now)]

    def keys(self) -> list:
        """Get all keys in LRU order (least recent first)."""
        return list(self._entries.keys())

    def items(self) -> Iterator[Tuple[str, CacheEntry]]:
        return iter(self._entries.items())

    @property
    def running_size(self) -> int:
        """Total size estimate maintained incrementally."""
        return self._total_size

    def total_size(self) -> int:
        """
        Recompute the total size estimate from the stored entries.

        Also resynchronises the running total.
        """
        self._total_size = sum(e.size_estimate for e in self._entries.values())
        return self._total_size

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
        self._total_size = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
