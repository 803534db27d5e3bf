"""
Cache configuration loading.

Resolution order, later sources winning:
    1. CacheConfig defaults
    2. JSON config file (explicit path, $CONFIG_PATH, or ./config.json)
    3. Environment variables (MAX_ENTRIES, MAX_MEMORY, DEFAULT_TTL,
       CHECK_INTERVAL, STATS_INTERVAL)
    4. Explicit overrides (command line flags)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigError
from .settings import OPTION_ALIASES, CacheConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"

ENV_OVERRIDES = {
    "MAX_ENTRIES": "max_entries",
    "MAX_MEMORY": "max_memory",
    "DEFAULT_TTL": "default_ttl",
    "CHECK_INTERVAL": "check_interval",
    "STATS_INTERVAL": "stats_interval",
}


def _env_positive_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}")
        return None
    return value if value > 0 else None


def _resolve_path(path: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    if path:
        return Path(path)
    env_path = environ.get("CONFIG_PATH")
    if env_path:
        return Path(env_path)
    default = Path.cwd() / DEFAULT_CONFIG_FILE
    return default if default.exists() else None


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a JSON options object from disk.

    Returns:
        The options dictionary, or an empty dict when the file is missing

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object
    """
    if not path.exists():
        logger.debug(f"Config file {path} not found, using defaults")
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    logger.info(f"Loaded cache config from {path}")
    return data


def load_cache_config(
        path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
) -> CacheConfig:
    """
    Build a CacheConfig from file, environment and explicit overrides.

    Args:
        path: Config file path (default: $CONFIG_PATH, then ./config.json)
        environ: Environment mapping (default: os.environ)
        overrides: Field values that win over everything else; None
            values are ignored

    Returns:
        The resolved, validated CacheConfig
    """
    environ = os.environ if environ is None else environ

    config_path = _resolve_path(path, environ)
    options: Dict[str, Any] = read_config_file(config_path) if config_path else {}

    for env_name, field_name in ENV_OVERRIDES.items():
        value = _env_positive_int(environ, env_name)
        if value is not None:
            _override(options, field_name, value)

    for field_name, value in (overrides or {}).items():
        if value is not None:
            _override(options, field_name, value)

    return CacheConfig.from_options(options)


def _override(options: Dict[str, Any], field_name: str, value: Any) -> None:
    # Drop the camelCase spelling so the override cannot be shadowed
    for camel, snake in OPTION_ALIASES.items():
        if snake == field_name:
            options.pop(camel, None)
    options[field_name] = value
