"""Extension configuration - config loading and the plugins section."""

from .loader import (
    ConfigLoader,
    deep_merge,
    get_config_loader,
    load_config,
    resolve_env_vars,
)
from .models import (
    DEFAULT_SERVER_UUID,
    ExtensionsConfig,
    GatheringConfig,
    LoggingComponentsConfig,
    LoggingConfig,
    LoggingOptionsConfig,
    PluginSectionConfig,
    ServerInfoConfig,
    StorageConfig,
)
from .plugins_section import PluginsConfigSection

__all__ = [
    # Config models
    "ExtensionsConfig",
    "ServerInfoConfig",
    "PluginSectionConfig",
    "GatheringConfig",
    "StorageConfig",
    "LoggingConfig",
    "LoggingComponentsConfig",
    "LoggingOptionsConfig",
    "DEFAULT_SERVER_UUID",
    # Plugins section
    "PluginsConfigSection",
    # Loader
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    # Utilities
    "resolve_env_vars",
    "deep_merge",
]
