"""
Memory Cache Configuration Settings

This module contains the process-level settings of the server and the
immutable configuration of a cache instance.
"""

import logging
import math
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("MEMORY_CACHE_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("MEMORY_CACHE_PORT", "7171"))

    # Protocol limits
    MAX_KEY_LENGTH: int = 256
    READ_BUFFER_SIZE: int = 1024 * 1024  # Longest accepted request line

    # Logging settings
    DEBUG: bool = os.environ.get("MEMORY_CACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("MEMORY_CACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()


# camelCase option names accepted from config files
OPTION_ALIASES = {
    "maxEntries": "max_entries",
    "maxMemory": "max_memory",
    "defaultTTL": "default_ttl",
    "checkInterval": "check_interval",
    "statsInterval": "stats_interval",
}

# Options counted in whole entries or bytes
INTEGER_OPTIONS = frozenset({"max_entries", "max_memory"})


@dataclass(frozen=True)
class CacheConfig:
    """
    Immutable configuration of a CacheManager.

    Attributes:
        max_entries: Hard cap on the number of entries
        max_memory: Hard cap on the total size estimate, in bytes
        default_ttl: TTL in seconds used when set() omits one
        check_interval: Seconds between cleanup passes
        stats_interval: Seconds between stats recomputations
    """

    max_entries: int = 1000
    max_memory: int = 50_000_000
    default_ttl: float = 3600
    check_interval: float = 60
    stats_interval: float = 30

    def __post_init__(self):
        """Validate that every limit and interval is a finite positive number."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{f.name} must be a number, got {value!r}")
            if f.name in INTEGER_OPTIONS and not isinstance(value, int):
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            if isinstance(value, float) and not math.isfinite(value):
                raise ConfigError(f"{f.name} must be finite, got {value!r}")
            if value <= 0:
                raise ConfigError(f"{f.name} must be positive, got {value!r}")

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "CacheConfig":
        """
        Build a config from an options mapping.

        Accepts snake_case field names or the camelCase names used in
        config files. Missing or None options fall back to the defaults;
        unknown options are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}

        for name, value in (options or {}).items():
            field_name = OPTION_ALIASES.get(name, name)
            if field_name not in known:
                logger.warning(f"Ignoring unknown cache option: {name}")
                continue
            if value is None:
                continue
            kwargs[field_name] = value

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the config as a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
