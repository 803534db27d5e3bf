"""
Eviction Policy Module

This module implements the two ways the cache removes entries on its own:

- TTL pass: drop every entry whose expiry time has passed
- Capacity pass: drop least recently used entries while the store holds
  more than max_entries entries or more than max_memory estimated bytes

LRU Concept:
- EntryStore keeps the most recently used entries at the END
- Least recently used entries are at the BEGINNING
- Eviction removes from the beginning

Neither pass touches hit/miss counters; the caller records the returned
keys as evictions.
"""

import logging
from typing import List

from .store import EntryStore

logger = logging.getLogger(__name__)


class EvictionPolicy:
    """
    TTL and capacity eviction over an EntryStore.

    Usage:
        policy = EvictionPolicy(max_entries=100, max_memory=1_000_000)
        expired = policy.evict_expired(store, now)
        evicted = policy.enforce_capacity(store)

    A single entry larger than max_memory is not special-cased: the
    capacity pass evicts every other entry first, then that one.

    Attributes:
        max_entries: Maximum number of entries allowed
        max_memory: Maximum total size estimate in bytes
    """

    def __init__(self, max_entries: int, max_memory: int):
        """
        Initialize the policy.

        Raises:
            ValueError: If either limit is not positive
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if max_memory <= 0:
            raise ValueError("max_memory must be positive")
        self.max_entries = max_entries
        self.max_memory = max_memory

    def is_over_capacity(self, store: EntryStore) -> bool:
        """Check whether either ceiling is currently exceeded."""
        return len(store) > self.max_entries or store.running_size > self.max_memory

    def evict_expired(self, store: EntryStore, now: float) -> List[str]:
        """
        Remove all entries expired at time now (active expiration).

        Returns:
            Keys removed, in no particular order

        Time Complexity: O(n)
        """
        expired = store.expired_keys(now)
        for key in expired:
            store.pop(key)

        if expired:
            logger.debug(f"TTL pass removed {len(expired)} entries")
        return expired

    def enforce_capacity(self, store: EntryStore) -> List[str]:
        """
        Evict least recently used entries until both ceilings hold.

        Returns:
            Keys evicted, least recently used first

        Time Complexity: O(k) for k evictions
        """
        evicted: List[str] = []

        while self.is_over_capacity(store):
            popped = store.pop_lru()
            if popped is None:
                break
            key, entry = popped
            evicted.append(key)
            logger.debug(f"Evicted {key!r} ({entry.size_estimate} bytes)")

        return evicted
