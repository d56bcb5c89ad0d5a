"""Extension application - wires configuration, logging, storage and the service.

Typical use by a host server:

    app = ExtensionApplication(config_path="plan-extensions.yaml")
    await app.initialize()
    await app.service.register(MyExtension())
    await app.service.update_player_values(player_uuid, player_name)
    await app.shutdown()
"""

import sys
from typing import Any, TextIO

from plan_extensions.config import ConfigLoader, ExtensionsConfig, PluginsConfigSection
from plan_extensions.errors import ErrorFactory, ErrorRegistry
from plan_extensions.logging import ExtensionLogger, LogConfig
from plan_extensions.service import (
    ExtensionService,
    reset_extension_service,
    set_extension_service,
)
from plan_extensions.storage import ExtensionStore, create_store


class ExtensionApplication:
    """
    Extension application orchestrator.

    Initialization sequence:

    1. Config loading
    2. Logger setup
    3. Error registry
    4. Extension store
    5. Plugins config section
    6. Extension service (built-ins registered)
    """

    def __init__(
        self,
        config_path: str | None = None,
        log_output: TextIO | None = None,
        builtin_extensions: dict[str, Any] | None = None,
    ):
        """Initialize application.

        Args:
            config_path: Path to config file (optional)
            log_output: Output stream for logs (default: sys.stdout)
            builtin_extensions: Override of the built-in extensions to register
        """
        self._config_path = config_path
        self._log_output = log_output or sys.stdout
        self._builtin_extensions = builtin_extensions
        self._initialized = False

        # Components (initialized in initialize())
        self.config_loader: ConfigLoader | None = None
        self.config: ExtensionsConfig | None = None
        self.logger: ExtensionLogger | None = None
        self.error_registry: ErrorRegistry | None = None
        self.error_factory: ErrorFactory | None = None
        self.store: ExtensionStore | None = None
        self.plugins_config: PluginsConfigSection | None = None
        self.service: ExtensionService | None = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Initialize all components."""
        if self._initialized:
            return

        # 1. Config Loader
        self.config_loader = ConfigLoader()
        self.config = self.config_loader.load(self._config_path)

        # 2. Logger
        log_config = LogConfig(
            level=self.config.logging.level,
            format=self.config.logging.format,
            show_context=self.config.logging.options.show_context,
            truncate_at=self.config.logging.options.truncate_at,
            components={
                "service": self.config.logging.components.service,
                "extension": self.config.logging.components.extension,
                "gatherer": self.config.logging.components.gatherer,
                "storage": self.config.logging.components.storage,
                "config": self.config.logging.components.config,
            },
            output=self._log_output,
        )
        self.logger = ExtensionLogger(log_config)

        # 3. Error Registry & Factory
        self.error_registry = ErrorRegistry()
        self.error_factory = ErrorFactory(self.error_registry)

        # 4. Extension Store
        self.store = create_store(self.config.storage)

        # 5. Plugins config section, written back to the loaded file
        self.plugins_config = PluginsConfigSection(
            self.config.plugins,
            path=self.config_loader.config_path,
        )

        # 6. Extension Service
        self.service = ExtensionService(
            self.plugins_config,
            self.store,
            logger=self.logger,
            server_uuid=self.config.server.server_uuid,
            provider_timeout=self.config.gathering.provider_timeout,
            dangling_condition=self.config.gathering.dangling_condition,
            builtin_extensions=self._builtin_extensions,
            error_factory=self.error_factory,
        )
        set_extension_service(self.service)
        self._initialized = True

        await self.service.enable()

    async def shutdown(self) -> None:
        """Shutdown all components."""
        if not self._initialized:
            return

        if self.service:
            self.service.close()
        if self.store:
            await self.store.close()
        reset_extension_service()

        self._initialized = False
