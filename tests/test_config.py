"""Tests for src/config.py: ContentHandlerConfig, TOML loading, env overlay."""

import pytest
from contenthandler import config as config_module
from contenthandler.config import (
    HANDLER_KEY_PROPERTY,
    ConfigSource,
    ContentHandlerConfig,
    load_config,
)


class TestContentHandlerConfigDefaults:
    def test_default_handler_key(self):
        cfg = ContentHandlerConfig()
        assert cfg.unstructured.handler_key == "UnstructuredDataHandler"
        assert cfg.get_property(HANDLER_KEY_PROPERTY) == "UnstructuredDataHandler"

    def test_unknown_property_is_none(self):
        assert ContentHandlerConfig().get_property("no.such.property") is None

    def test_explicit_property_wins(self):
        cfg = ContentHandlerConfig(properties={HANDLER_KEY_PROPERTY: "ImageHandler"})
        assert cfg.get_property(HANDLER_KEY_PROPERTY) == "ImageHandler"

    def test_is_a_config_source(self):
        assert isinstance(ContentHandlerConfig(), ConfigSource)


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def _isolate(self, monkeypatch, tmp_path):
        """Keep the real CWD, home config and env out of these tests."""
        monkeypatch.delenv("CONTENTHANDLER_HANDLER_KEY", raising=False)
        monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", tmp_path / "missing.toml")

    def test_load_from_explicit_path(self, tmp_path):
        toml_path = tmp_path / ".contenthandler.toml"
        toml_path.write_text('[unstructured]\nhandler_key = "BinaryDataHandler"\n')
        cfg = load_config(toml_path)
        assert cfg.get_property(HANDLER_KEY_PROPERTY) == "BinaryDataHandler"

    def test_load_properties_table(self, tmp_path):
        toml_path = tmp_path / "cfg.toml"
        toml_path.write_text(
            '[properties]\n"shr.contenthandler.unstructureddatahandler.key" = "ImageHandler"\n'
        )
        cfg = load_config(toml_path)
        assert cfg.get_property(HANDLER_KEY_PROPERTY) == "ImageHandler"

    def test_load_missing_path_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nonexistent.toml")
        assert cfg.unstructured.handler_key == "UnstructuredDataHandler"

    def test_load_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".contenthandler.toml").write_text('[unstructured]\nhandler_key = "FromCwd"\n')
        monkeypatch.chdir(tmp_path)
        assert load_config().unstructured.handler_key == "FromCwd"

    def test_load_falls_back_to_global(self, tmp_path, monkeypatch):
        global_path = tmp_path / "global.toml"
        global_path.write_text('[unstructured]\nhandler_key = "FromHome"\n')
        monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", global_path)
        monkeypatch.chdir(tmp_path)
        assert load_config().unstructured.handler_key == "FromHome"

    def test_invalid_toml_returns_defaults(self, tmp_path, caplog):
        toml_path = tmp_path / "bad.toml"
        toml_path.write_text("[unstructured\nhandler_key = ")
        cfg = load_config(toml_path)
        assert cfg.unstructured.handler_key == "UnstructuredDataHandler"
        assert "Failed to parse" in caplog.text

    def test_env_var_overrides_toml(self, tmp_path, monkeypatch):
        toml_path = tmp_path / "cfg.toml"
        toml_path.write_text('[unstructured]\nhandler_key = "FromToml"\n')
        monkeypatch.setenv("CONTENTHANDLER_HANDLER_KEY", "FromEnv")
        assert load_config(toml_path).get_property(HANDLER_KEY_PROPERTY) == "FromEnv"

    def test_env_var_overrides_properties_entry(self, tmp_path, monkeypatch):
        toml_path = tmp_path / "cfg.toml"
        toml_path.write_text(
            '[properties]\n"shr.contenthandler.unstructureddatahandler.key" = "FromToml"\n'
        )
        monkeypatch.setenv("CONTENTHANDLER_HANDLER_KEY", "FromEnv")
        cfg = load_config(toml_path)
        assert cfg.get_property(HANDLER_KEY_PROPERTY) == "FromEnv"
        assert cfg.unstructured.handler_key == "FromEnv"
