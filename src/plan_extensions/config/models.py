"""Extension configuration data models."""

from dataclasses import dataclass, field

from plan_extensions.types import DanglingConditionPolicy, LogFormat, LogLevel, StorageType

DEFAULT_SERVER_UUID = "00000000-0000-0000-0000-000000000000"


@dataclass
class ServerInfoConfig:
    """Identity of the server this process gathers for."""

    server_uuid: str = DEFAULT_SERVER_UUID


@dataclass
class PluginSectionConfig:
    """Per-extension section under ``plugins``."""

    enabled: bool = True


@dataclass
class GatheringConfig:
    """Gathering configuration."""

    provider_timeout: float = 10.0  # seconds, 0 = no limit
    dangling_condition: DanglingConditionPolicy = DanglingConditionPolicy.IGNORE_GATE


@dataclass
class StorageConfig:
    """Storage configuration."""

    type: StorageType = StorageType.MEMORY
    path: str = "./data/extensions.db"  # For sqlite type


@dataclass
class LoggingComponentsConfig:
    """Logging components configuration."""

    service: bool = True
    extension: bool = True
    gatherer: bool = True
    storage: bool = True
    config: bool = True


@dataclass
class LoggingOptionsConfig:
    """Logging options configuration."""

    show_context: bool = True
    truncate_at: int = 200


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)
    options: LoggingOptionsConfig = field(default_factory=LoggingOptionsConfig)


@dataclass
class ExtensionsConfig:
    """Root configuration object."""

    server: ServerInfoConfig = field(default_factory=ServerInfoConfig)
    plugins: dict[str, PluginSectionConfig] = field(default_factory=dict)
    gathering: GatheringConfig = field(default_factory=GatheringConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
