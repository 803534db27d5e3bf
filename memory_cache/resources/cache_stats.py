"""MCP resource publishing live cache statistics."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from ..cache.manager import CacheManager

STATS_URI = "cache://stats"


def register_resources(mcp: FastMCP, *, cache: CacheManager) -> None:
    """
    Register the cache statistics resource for the MCP server.
    """

    @mcp.resource(
        STATS_URI,
        name="Cache Statistics",
        mime_type="application/json",
        description="Real-time cache performance metrics",
    )
    def cache_stats() -> str:
        return json.dumps(cache.get_stats().to_dict(), indent=2)
