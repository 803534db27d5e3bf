"""Configuration module for Memory Cache."""

from .loader import load_cache_config
from .settings import CacheConfig, Settings, settings

__all__ = ["CacheConfig", "Settings", "settings", "load_cache_config"]
