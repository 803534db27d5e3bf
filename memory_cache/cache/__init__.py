"""Cache module for Memory Cache."""

from .entry import CacheEntry, CacheStats
from .eviction import EvictionPolicy
from .manager import CacheManager
from .scheduler import MaintenanceScheduler, PeriodicTask
from .sizing import FALLBACK_SIZE_ESTIMATE, estimate_size
from .store import EntryStore

__all__ = [
    "CacheEntry",
    "CacheManager",
    "CacheStats",
    "EntryStore",
    "EvictionPolicy",
    "FALLBACK_SIZE_ESTIMATE",
    "MaintenanceScheduler",
    "PeriodicTask",
    "estimate_size",
]
