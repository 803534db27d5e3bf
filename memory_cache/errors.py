"""Exception hierarchy for the memory cache."""

from __future__ import annotations


class CacheError(Exception):
    """Base error for the memory cache."""


class ConfigError(CacheError, ValueError):
    """Raised when cache configuration is invalid or unreadable."""


class ValidationError(CacheError):
    """Raised when request input is invalid."""


class NotFoundError(CacheError, KeyError):
    """Raised by protocol layers when a key is absent or expired."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
