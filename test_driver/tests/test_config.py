"""Tests for config loading and EditorSettings in dsc_tools.core."""

from __future__ import annotations

from pathlib import Path

import pytest

from dsc_tools.core import ConfigError, EditorSettings, load_config


# ── load_config ───────────────────────────────────────────────────────


class TestLoadConfig:
    """Unit tests for load_config()."""

    def test_load_config_no_file(self, tmp_path: Path):
        """A missing config file returns an empty dict."""
        assert load_config(tmp_path / "dsc_tools.yaml") == {}

    def test_load_config_default_location(self, tmp_path: Path, monkeypatch):
        """Without a path, dsc_tools.yaml in the current directory is used."""
        (tmp_path / "dsc_tools.yaml").write_text("editor:\n  indent: '    '\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert load_config() == {"editor": {"indent": "    "}}

    def test_load_config_empty(self, tmp_path: Path):
        """An empty (or whitespace-only) file returns an empty dict."""
        path = tmp_path / "dsc_tools.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == {}

    def test_load_config_non_dict(self, tmp_path: Path):
        """A YAML file whose top-level value is not a dict raises ConfigError."""
        path = tmp_path / "dsc_tools.yaml"
        path.write_text("- item1\n- item2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="top-level mapping"):
            load_config(path)

    def test_load_config_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "dsc_tools.yaml"
        path.write_text("editor: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


# ── EditorSettings ────────────────────────────────────────────────────


class TestEditorSettings:
    def test_defaults(self):
        settings = EditorSettings.from_config({})
        assert settings == EditorSettings()
        assert settings.section == "Components"
        assert settings.indent == "  "
        assert settings.max_line_length is None

    def test_overrides(self):
        config = {"editor": {"indent": "\t", "max_line_length": 1000, "bak_extension": ".orig"}}
        settings = EditorSettings.from_config(config)
        assert settings.indent == "\t"
        assert settings.max_line_length == 1000
        assert settings.bak_extension == ".orig"

    def test_null_editor_section(self):
        assert EditorSettings.from_config({"editor": None}) == EditorSettings()

    def test_editor_not_mapping(self):
        with pytest.raises(ConfigError, match="must be a mapping"):
            EditorSettings.from_config({"editor": ["indent"]})

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="unknown keys"):
            EditorSettings.from_config({"editor": {"indnet": "  "}})

    @pytest.mark.parametrize("value", [0, -5, "100"])
    def test_bad_limit(self, value):
        with pytest.raises(ConfigError, match="positive integer"):
            EditorSettings.from_config({"editor": {"max_section_name_length": value}})

    def test_bad_string(self):
        with pytest.raises(ConfigError, match="must be a string"):
            EditorSettings.from_config({"editor": {"indent": 4}})

    def test_section_must_be_alphanumeric(self):
        with pytest.raises(ConfigError, match="alphanumeric"):
            EditorSettings.from_config({"editor": {"section": "Components.X64"}})

    def test_section_must_be_ascii(self):
        """A name the header pattern can never match is rejected up front."""
        with pytest.raises(ConfigError, match="ASCII alphanumeric"):
            EditorSettings.from_config({"editor": {"section": "Komponenté"}})

    @pytest.mark.parametrize("key", ["tmp_extension", "bak_extension"])
    def test_empty_extension(self, key):
        with pytest.raises(ConfigError, match="non-empty file suffix"):
            EditorSettings.from_config({"editor": {key: ""}})

    def test_extension_with_separator(self):
        with pytest.raises(ConfigError, match="non-empty file suffix"):
            EditorSettings.from_config({"editor": {"tmp_extension": "/tmp"}})

    def test_extensions_must_differ(self):
        with pytest.raises(ConfigError, match="must differ"):
            EditorSettings.from_config({"editor": {"tmp_extension": ".x", "bak_extension": ".x"}})

    def test_tmp_extension_clashing_with_default_bak(self):
        with pytest.raises(ConfigError, match="must differ"):
            EditorSettings.from_config({"editor": {"tmp_extension": ".bak"}})
