"""Tests for configuration system.

Tests the ConfigBuilder class and configuration loading mechanism,
including YAML loading, environment variable resolution, and nested access.
"""

import pytest

from catalog_bootstrap.base.errors import ConfigurationError
from catalog_bootstrap.utils.config import (
    ConfigBuilder,
    get_config_builder,
    get_config_value,
    load_config,
)


class TestConfigBuilder:
    """Test ConfigBuilder class."""

    def test_config_builder_loads_yaml(self, tmp_path):
        """Test that ConfigBuilder loads valid YAML configuration."""
        config_file = tmp_path / "config.yml"
        config_file.write_text(
            """
catalog:
  url: https://example.org/catalog.bom
runtime:
  base_dir: /srv/catalog
"""
        )

        builder = ConfigBuilder(str(config_file))

        assert builder.raw_config["catalog"]["url"] == "https://example.org/catalog.bom"
        assert builder.get("runtime.base_dir") == "/srv/catalog"
        assert builder.config_path == config_file

    def test_environment_variable_resolution(self, tmp_path, monkeypatch):
        """Test that environment variables are resolved in config."""
        monkeypatch.setenv("TEST_CATALOG_HOST", "catalog.internal")
        monkeypatch.delenv("TEST_UNSET_VARIABLE", raising=False)

        config_file = tmp_path / "config.yml"
        config_file.write_text(
            """
catalog:
  url: https://${TEST_CATALOG_HOST}/catalog.bom
  load_mode: ${TEST_UNSET_VARIABLE:-load-catalog-url}
runtime:
  base_dir: $TEST_UNSET_VARIABLE
"""
        )

        builder = ConfigBuilder(str(config_file))

        assert builder.get("catalog.url") == "https://catalog.internal/catalog.bom"
        assert builder.get("catalog.load_mode") == "load-catalog-url"
        # Unresolvable placeholders are kept verbatim
        assert builder.get("runtime.base_dir") == "$TEST_UNSET_VARIABLE"

    def test_unexpanded_config_preserves_placeholders(self, tmp_path, monkeypatch):
        """Test that the unexpanded view keeps ${VAR} placeholders."""
        monkeypatch.setenv("TEST_CATALOG_HOST", "catalog.internal")
        config_file = tmp_path / "config.yml"
        config_file.write_text("catalog:\n  url: https://${TEST_CATALOG_HOST}/c.bom\n")

        builder = ConfigBuilder(str(config_file))

        assert builder.get_unexpanded_config()["catalog"]["url"] == "https://${TEST_CATALOG_HOST}/c.bom"

    def test_get_returns_default_for_missing_path(self):
        """Test dot-path access falls back to the default."""
        builder = ConfigBuilder.from_dict({"catalog": {"url": "mem://a.bom"}})

        assert builder.get("catalog.url") == "mem://a.bom"
        assert builder.get("catalog.load_mode") is None
        assert builder.get("catalog.url.deeper", "fallback") == "fallback"
        assert builder.get("resources.http_timeout", 30) == 30

    def test_get_raw_required(self):
        """Test that required raw lookups fail fast."""
        builder = ConfigBuilder.from_dict({"catalog": {"load_mode": "load-persisted-state"}})

        assert builder.get_raw("catalog.load_mode") == "load-persisted-state"
        assert builder.get_raw("catalog.url") is None
        with pytest.raises(ConfigurationError, match="catalog.url"):
            builder.get_raw("catalog.url", required=True)

    def test_from_dict_resolves_environment(self, monkeypatch):
        monkeypatch.setenv("TEST_BASE_DIR", "/var/lib/catalog")

        builder = ConfigBuilder.from_dict({"runtime": {"base_dir": "${TEST_BASE_DIR}"}})

        assert builder.get("runtime.base_dir") == "/var/lib/catalog"
        assert builder.config_path is None

    def test_empty_file(self, tmp_path):
        """Test that an empty file is an empty configuration."""
        config_file = tmp_path / "config.yml"
        config_file.write_text("")

        assert ConfigBuilder(str(config_file)).raw_config == {}

    def test_non_mapping_file_raises(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigBuilder(str(config_file))

    def test_invalid_yaml_raises(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("catalog: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Error parsing YAML"):
            ConfigBuilder(str(config_file))

    def test_missing_cwd_config_raises(self, tmp_path, monkeypatch):
        """Test that no path and no ./config.yml is reported clearly."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(FileNotFoundError, match="No config.yml found"):
            ConfigBuilder()


class TestGlobalConfiguration:
    """Test singleton access helpers."""

    def test_get_config_value_requires_path(self):
        with pytest.raises(ValueError):
            get_config_value("")

    def test_explicit_path_is_cached(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("catalog:\n  url: mem://a.bom\n")

        first = get_config_builder(str(config_file))
        second = get_config_builder(str(config_file))

        assert first is second
        assert load_config(str(config_file))["catalog"]["url"] == "mem://a.bom"

    def test_set_as_default(self, tmp_path):
        """Test that an explicit config can become the default singleton."""
        config_file = tmp_path / "config.yml"
        config_file.write_text("catalog:\n  url: mem://default.bom\n")

        get_config_builder(str(config_file), set_as_default=True)

        assert get_config_value("catalog.url") == "mem://default.bom"

    def test_config_file_environment_variable(self, tmp_path, monkeypatch):
        config_file = tmp_path / "custom.yml"
        config_file.write_text("runtime:\n  base_dir: /opt/catalog\n")
        monkeypatch.setenv("CONFIG_FILE", str(config_file))

        assert get_config_value("runtime.base_dir") == "/opt/catalog"

    def test_cwd_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("CONFIG_FILE", raising=False)
        (tmp_path / "config.yml").write_text("catalog:\n  load_mode: load-catalog-url\n")

        assert get_config_value("catalog.load_mode") == "load-catalog-url"
        assert get_config_value("catalog.url", "none") == "none"
