"""The ``plugins`` config section that gates extension registration."""

import threading
from pathlib import Path
from typing import Any

import yaml

from .models import PluginSectionConfig


class PluginsConfigSection:
    """Enable/disable switches of extensions, by plugin name.

    Sections are created on first sight of an extension (enabled by default)
    and, when backed by a file, written back so users can switch them off.
    """

    def __init__(
        self,
        sections: dict[str, PluginSectionConfig] | None = None,
        path: str | Path | None = None,
    ):
        """Initialize the section.

        Args:
            sections: Already loaded ``plugins`` sections
            path: Optional YAML file new sections are persisted to
        """
        self._sections: dict[str, PluginSectionConfig] = dict(sections or {})
        self._path = Path(path) if path is not None else None
        self._lock = threading.Lock()

    def has_section(self, plugin_name: str) -> bool:
        """Check whether the extension already has a section."""
        with self._lock:
            return plugin_name in self._sections

    def create_section(self, plugin_name: str) -> None:
        """Create an enabled section for the extension.

        Raises:
            OSError: If the section could not be written to the config file
        """
        with self._lock:
            if plugin_name in self._sections:
                return
            if self._path is not None:
                self._write_section(self._path, plugin_name)
            self._sections[plugin_name] = PluginSectionConfig(enabled=True)

    def is_enabled(self, plugin_name: str) -> bool:
        """Check whether the extension is enabled. Unknown extensions are not."""
        with self._lock:
            section = self._sections.get(plugin_name)
            return section is not None and section.enabled

    def set_enabled(self, plugin_name: str, enabled: bool) -> None:
        """Switch an extension on or off in memory."""
        with self._lock:
            self._sections[plugin_name] = PluginSectionConfig(enabled=enabled)

    def names(self) -> list[str]:
        """List known section names."""
        with self._lock:
            return list(self._sections)

    def _write_section(self, path: Path, plugin_name: str) -> None:
        data: dict[str, Any] = {}
        if path.exists():
            try:
                with path.open() as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise OSError(f"Config file {path} is not valid YAML: {e}") from e

        plugins = data.get("plugins")
        if not isinstance(plugins, dict):
            plugins = {}
        plugins[plugin_name] = {"enabled": True}
        data["plugins"] = plugins

        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
