"""MCP tools that store, retrieve and clear cached data.

Registers 'store_data', 'retrieve_data', 'clear_cache' and
'get_cache_stats' on a FastMCP server, all backed by one CacheManager.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from ..cache.manager import CacheManager
from ..errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_MISSING = object()


def _require_key(key: Optional[str]) -> str:
    if not key or not key.strip():
        raise ValidationError("Missing cache key")
    return key


def register(mcp: FastMCP, *, cache: CacheManager) -> None:
    @mcp.tool(name="store_data")
    async def store_data(key: str, value: Any, ttl: Optional[float] = None) -> str:
        """Store data in the cache with optional TTL.

        Parameters:
          - key: unique identifier for the cached data.
          - value: any JSON value to cache.
          - ttl: time-to-live in seconds (optional; the server default applies).
        """
        key = _require_key(key)
        if ttl is not None and not 0 <= ttl < math.inf:
            raise ValidationError("ttl must be finite and non-negative")

        cache.set(key, value, ttl=ttl)
        logger.debug(f"Stored {key!r} (ttl={ttl})")
        return f"Successfully stored data with key: {key}"

    @mcp.tool(name="retrieve_data")
    async def retrieve_data(key: str) -> str:
        """Retrieve data from the cache.

        Returns the cached value as pretty-printed JSON. Raises NotFoundError
        when the key is absent or expired.
        """
        key = _require_key(key)
        value = cache.get(key, _MISSING)
        if value is _MISSING:
            raise NotFoundError(f"No data found for key: {key}")
        return json.dumps(value, indent=2, default=repr)

    @mcp.tool(name="clear_cache")
    async def clear_cache(key: Optional[str] = None) -> str:
        """Clear specific or all cache entries.

        Parameters:
          - key: specific key to clear (optional - clears all if not provided).
        """
        if key:
            if cache.delete(key):
                return f"Successfully cleared cache entry: {key}"
            return f"No cache entry found for key: {key}"

        cache.clear()
        return "Successfully cleared all cache entries"

    @mcp.tool(name="get_cache_stats")
    async def get_cache_stats() -> str:
        """Get cache statistics as pretty-printed JSON."""
        return json.dumps(cache.get_stats().to_dict(), indent=2)
