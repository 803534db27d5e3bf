"""
Memory Cache: In-Process Key-Value Cache

An in-memory key-value cache with TTL expiry, size-bounded LRU eviction
and live statistics, served over a line-oriented TCP protocol or as an
MCP tool server on stdio.
"""

__version__ = "0.1.0"
