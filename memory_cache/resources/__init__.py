"""MCP resources exposing the cache."""
