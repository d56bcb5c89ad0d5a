"""Tests for the plugins config section."""

from pathlib import Path

import pytest
import yaml

from plan_extensions.config import PluginSectionConfig, PluginsConfigSection


class TestPluginsConfigSection:
    """Tests for PluginsConfigSection."""

    def test_unknown_extension_is_not_enabled(self):
        section = PluginsConfigSection()
        assert not section.has_section("LiteBans")
        assert not section.is_enabled("LiteBans")

    def test_create_section_enables(self):
        section = PluginsConfigSection()
        section.create_section("LiteBans")

        assert section.has_section("LiteBans")
        assert section.is_enabled("LiteBans")
        assert section.names() == ["LiteBans"]

    def test_existing_disabled_section(self):
        section = PluginsConfigSection({"LiteBans": PluginSectionConfig(enabled=False)})
        section.create_section("LiteBans")
        assert not section.is_enabled("LiteBans")

    def test_set_enabled(self):
        section = PluginsConfigSection()
        section.set_enabled("LiteBans", False)
        assert section.has_section("LiteBans")
        assert not section.is_enabled("LiteBans")

    def test_create_section_writes_file(self, tmp_path: Path):
        path = tmp_path / "plan-extensions.yaml"
        path.write_text("server:\n  server_uuid: abc\nplugins:\n  Vault:\n    enabled: false\n")

        section = PluginsConfigSection(path=path)
        section.create_section("LiteBans")

        data = yaml.safe_load(path.read_text())
        assert data["server"] == {"server_uuid": "abc"}
        assert data["plugins"]["Vault"] == {"enabled": False}
        assert data["plugins"]["LiteBans"] == {"enabled": True}

    def test_create_section_creates_file(self, tmp_path: Path):
        path = tmp_path / "nested" / "plan-extensions.yaml"
        PluginsConfigSection(path=path).create_section("LiteBans")
        assert yaml.safe_load(path.read_text()) == {"plugins": {"LiteBans": {"enabled": True}}}

    def test_write_failure_raises_oserror(self, tmp_path: Path):
        # A directory where the file should be
        path = tmp_path / "plan-extensions.yaml"
        path.mkdir()
        section = PluginsConfigSection(path=path)

        with pytest.raises(OSError):
            section.create_section("LiteBans")
        assert not section.has_section("LiteBans")

    def test_invalid_yaml_raises_oserror(self, tmp_path: Path):
        path = tmp_path / "plan-extensions.yaml"
        path.write_text("plugins: [unclosed\n")
        with pytest.raises(OSError):
            PluginsConfigSection(path=path).create_section("LiteBans")

    def test_section_without_file_writes_nothing(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        section = PluginsConfigSection()

        section.create_section("LiteBans")

        assert section.is_enabled("LiteBans")
        assert list(tmp_path.iterdir()) == []
