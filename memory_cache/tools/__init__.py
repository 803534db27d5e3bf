"""MCP tools exposing the cache."""
