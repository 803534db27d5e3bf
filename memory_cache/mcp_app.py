"""MCP server bootstrap for the memory cache.

Creates the FastMCP instance and registers the cache tools and the
statistics resource against a caller-owned CacheManager.
"""

from mcp.server.fastmcp import FastMCP

from .cache.manager import CacheManager
from .resources.cache_stats import register_resources
from .tools.cache_tools import register as register_cache_tools

SERVER_NAME = "memory-cache"


def create_mcp_server(cache: CacheManager) -> FastMCP:
    mcp = FastMCP(SERVER_NAME)
    register_cache_tools(mcp, cache=cache)
    register_resources(mcp, cache=cache)
    return mcp
