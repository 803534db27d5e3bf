"""
Tests for configuration

These tests verify CacheConfig and load_cache_config:
- Defaults, validation, option aliases
- Config file, environment and override precedence

Run with: python -m pytest tests/test_config.py -v
"""

import json
import pytest

from memory_cache.config.loader import load_cache_config, read_config_file
from memory_cache.config.settings import CacheConfig
from memory_cache.errors import ConfigError


class TestCacheConfig:
    """Test the CacheConfig dataclass."""

    def test_defaults(self):
        config = CacheConfig()
        assert config.to_dict() == {
            "max_entries": 1000,
            "max_memory": 50_000_000,
            "default_ttl": 3600,
            "check_interval": 60,
            "stats_interval": 30,
        }

    def test_immutable(self):
        config = CacheConfig()
        with pytest.raises(AttributeError):
            config.max_entries = 5

    @pytest.mark.parametrize("field", [
        "max_entries", "max_memory", "default_ttl", "check_interval", "stats_interval",
    ])
    def test_rejects_non_positive(self, field):
        with pytest.raises(ConfigError):
            CacheConfig(**{field: 0})

    @pytest.mark.parametrize("field", [
        "max_entries", "max_memory", "default_ttl", "check_interval", "stats_interval",
    ])
    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_rejects_non_finite(self, field, value):
        with pytest.raises(ConfigError):
            CacheConfig(**{field: value})

    @pytest.mark.parametrize("field", ["max_entries", "max_memory"])
    def test_limits_must_be_integers(self, field):
        with pytest.raises(ConfigError, match="integer"):
            CacheConfig(**{field: 2.5})

    def test_intervals_accept_floats(self):
        config = CacheConfig(default_ttl=0.5, check_interval=1.5, stats_interval=2.5)
        assert config.check_interval == 1.5

    def test_rejects_non_numbers(self):
        with pytest.raises(ConfigError):
            CacheConfig(max_entries="10")
        with pytest.raises(ConfigError):
            CacheConfig(max_entries=True)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            CacheConfig(max_memory=-1)

    def test_from_options_camel_case(self):
        config = CacheConfig.from_options({
            "maxEntries": 10,
            "maxMemory": 2048,
            "defaultTTL": 5,
            "checkInterval": 1,
            "statsInterval": 2,
        })
        assert config == CacheConfig(10, 2048, 5, 1, 2)

    def test_from_options_snake_case(self):
        assert CacheConfig.from_options({"max_entries": 7}).max_entries == 7

    def test_from_options_empty(self):
        assert CacheConfig.from_options(None) == CacheConfig()
        assert CacheConfig.from_options({}) == CacheConfig()

    def test_from_options_ignores_none_and_unknown(self, caplog):
        config = CacheConfig.from_options({"maxEntries": None, "color": "blue"})
        assert config == CacheConfig()
        assert "color" in caplog.text


class TestLoadCacheConfig:
    """Test file, environment and override resolution."""

    def test_no_sources(self, tmp_path, monkeypatch):
        """Test defaults when there is no file and no environment."""
        monkeypatch.chdir(tmp_path)
        assert load_cache_config(environ={}) == CacheConfig()

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"maxEntries": 20, "defaultTTL": 30}))

        config = load_cache_config(path=str(path), environ={})

        assert config.max_entries == 20
        assert config.default_ttl == 30

    def test_config_path_env(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"maxMemory": 4096}))

        config = load_cache_config(environ={"CONFIG_PATH": str(path)})

        assert config.max_memory == 4096

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "config.json").write_text(json.dumps({"statsInterval": 5}))
        monkeypatch.chdir(tmp_path)

        assert load_cache_config(environ={}).stats_interval == 5

    def test_missing_explicit_file_uses_defaults(self, tmp_path):
        config = load_cache_config(path=str(tmp_path / "absent.json"), environ={})
        assert config == CacheConfig()

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"maxEntries": 20, "checkInterval": 9}))

        config = load_cache_config(path=str(path), environ={"MAX_ENTRIES": "50"})

        assert config.max_entries == 50
        assert config.check_interval == 9

    def test_all_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_cache_config(environ={
            "MAX_ENTRIES": "1",
            "MAX_MEMORY": "2",
            "DEFAULT_TTL": "3",
            "CHECK_INTERVAL": "4",
            "STATS_INTERVAL": "5",
        })
        assert config == CacheConfig(1, 2, 3, 4, 5)

    @pytest.mark.parametrize("raw", ["abc", "0", "-3", ""])
    def test_invalid_env_ignored(self, tmp_path, monkeypatch, raw):
        monkeypatch.chdir(tmp_path)
        config = load_cache_config(environ={"MAX_ENTRIES": raw})
        assert config.max_entries == 1000

    def test_overrides_win(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"maxEntries": 20}))

        config = load_cache_config(
            path=str(path),
            environ={"MAX_ENTRIES": "50"},
            overrides={"max_entries": 70, "default_ttl": None},
        )

        assert config.max_entries == 70
        assert config.default_ttl == 3600

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            read_config_file(path)

    @pytest.mark.parametrize("text", [
        '{"maxMemory": NaN}',
        '{"checkInterval": Infinity}',
        '{"maxEntries": 2.5}',
    ])
    def test_non_finite_or_fractional_file_values(self, tmp_path, text):
        """Test JSON NaN/Infinity and fractional limits are refused."""
        path = tmp_path / "cache.json"
        path.write_text(text)
        with pytest.raises(ConfigError):
            load_cache_config(path=str(path), environ={})

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_cache_config(path=str(path), environ={})
