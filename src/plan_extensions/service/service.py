"""Extension service - registration and gathering fan-out."""

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

from plan_extensions.config.models import DEFAULT_SERVER_UUID
from plan_extensions.config.plugins_section import PluginsConfigSection
from plan_extensions.errors import ErrorFactory, ExtensionError, get_error_factory
from plan_extensions.extension.api import Group
from plan_extensions.extractor.extractor import DataProviderExtractor
from plan_extensions.gathering import (
    GatheringResult,
    GroupSubject,
    PlayerSubject,
    ProviderValueGatherer,
    ServerSubject,
    Subject,
)
from plan_extensions.logging import ExtensionLogger
from plan_extensions.storage.base import ExtensionStore
from plan_extensions.types import DanglingConditionPolicy

logger = logging.getLogger(__name__)

ExtensionFactory = Callable[[], Any]


class ExtensionService:
    """Registry of data extensions and the entry point for gathering.

    Registration validates an extension, consults the ``plugins`` config
    section and stores the extension's metadata. Updates fan out to every
    registered extension concurrently; a failing extension never affects
    the others.

    The gatherer table is replaced as a whole on every registration, so
    an update iterates a consistent snapshot without holding the lock.
    """

    def __init__(
        self,
        plugins_config: PluginsConfigSection,
        store: ExtensionStore,
        logger: ExtensionLogger | None = None,
        server_uuid: str = DEFAULT_SERVER_UUID,
        provider_timeout: float = 10.0,
        dangling_condition: DanglingConditionPolicy = DanglingConditionPolicy.IGNORE_GATE,
        builtin_extensions: Mapping[str, ExtensionFactory] | None = None,
        error_factory: ErrorFactory | None = None,
    ):
        """Initialize service.

        Args:
            plugins_config: Enable/disable switches of extensions
            store: Extension store for metadata and values
            logger: Extension logger (defaults to a new ExtensionLogger)
            server_uuid: Identity of this server
            provider_timeout: Seconds a provider may take, 0 for no limit
            dangling_condition: Policy for ``@conditional`` names nobody provides
            builtin_extensions: Extensions registered by ``enable()``
                (defaults to BUILTIN_EXTENSIONS)
            error_factory: Error factory (defaults to the shared one)
        """
        self._plugins_config = plugins_config
        self._store = store
        self._logger = logger or ExtensionLogger()
        self._server_uuid = server_uuid
        self._provider_timeout = provider_timeout
        self._dangling_condition = DanglingConditionPolicy(dangling_condition)
        self._errors = error_factory or get_error_factory()

        if builtin_extensions is None:
            from .builtin import BUILTIN_EXTENSIONS

            builtin_extensions = BUILTIN_EXTENSIONS
        self._builtin_extensions = dict(builtin_extensions)

        self._lock = threading.Lock()
        self._gatherers: dict[str, ProviderValueGatherer] = {}
        self._registering: set[str] = set()

    @property
    def extension_names(self) -> list[str]:
        """Names of registered extensions, in registration order."""
        return list(self._gatherers)

    def get_gatherer(self, plugin_name: str) -> ProviderValueGatherer | None:
        return self._gatherers.get(plugin_name)

    async def enable(self) -> None:
        """Register the built-in extensions."""
        for name, factory in self._builtin_extensions.items():
            try:
                extension = factory()
            except Exception as e:
                logger.error(f"Failed to create built-in extension {name}: {e}")
                continue
            await self.register(extension)

    async def register(self, extension: Any) -> bool:
        """Register an extension.

        Never raises. Every reason for not registering is logged.

        Args:
            extension: Extension instance

        Returns:
            True if the extension was registered
        """
        class_name = type(extension).__name__
        try:
            extractor = DataProviderExtractor(
                extension, self._dangling_condition, error_factory=self._errors
            )
        except ExtensionError as e:
            self._logger.extension(e.extension or class_name).rejected(e)
            return False
        except Exception as e:
            error = self._errors.create(
                "INTERNAL_ERROR",
                detail=f"{type(e).__name__}: {e}",
                extension=class_name,
                error_type=type(e).__name__,
            )
            self._logger.extension(class_name).rejected(error)
            return False

        plugin_name = extractor.plugin_name
        scope = self._logger.extension(plugin_name)

        with self._lock:
            if plugin_name in self._gatherers or plugin_name in self._registering:
                duplicate = True
            else:
                duplicate = False
                self._registering.add(plugin_name)
        if duplicate:
            scope.duplicate()
            return False

        try:
            # The gate may write the YAML config file
            loop = asyncio.get_running_loop()
            if not await loop.run_in_executor(None, self._passes_config_gate, plugin_name):
                return False

            for warning in extractor.warnings:
                scope.implementation_mistake(warning)

            gatherer = ProviderValueGatherer(
                extension,
                extractor.descriptor,
                self._store,
                self._server_uuid,
                logger=self._logger,
                provider_timeout=self._provider_timeout,
                error_factory=self._errors,
            )
            try:
                await gatherer.store_extension_information()
            except Exception as e:
                scope.metadata_failed(e)

            with self._lock:
                gatherers = dict(self._gatherers)
                gatherers[plugin_name] = gatherer
                self._gatherers = gatherers
        finally:
            with self._lock:
                self._registering.discard(plugin_name)

        scope.registered(len(extractor.providers))
        return True

    def _passes_config_gate(self, plugin_name: str) -> bool:
        scope = self._logger.extension(plugin_name)
        try:
            if not self._plugins_config.has_section(plugin_name):
                self._plugins_config.create_section(plugin_name)
                scope.section_created()
        except OSError as e:
            scope.config_failed(e)
            return False

        if not self._plugins_config.is_enabled(plugin_name):
            scope.disabled()
            return False
        return True

    async def update_subject(self, subject: Subject) -> dict[str, GatheringResult]:
        """Run a gathering pass for the subject on every registered extension.

        Args:
            subject: Player, group or server

        Returns:
            Results by extension name; extensions whose pass crashed are left out
        """
        gatherers = list(self._gatherers.values())
        results = await asyncio.gather(
            *(self._guarded_run(gatherer, subject) for gatherer in gatherers)
        )
        return {
            gatherer.plugin_name: result
            for gatherer, result in zip(gatherers, results, strict=True)
            if result is not None
        }

    async def _guarded_run(
        self, gatherer: ProviderValueGatherer, subject: Subject
    ) -> GatheringResult | None:
        try:
            return await gatherer.run(subject)
        except (KeyboardInterrupt, asyncio.CancelledError):
            raise
        except BaseException as e:  # noqa: BLE001
            self._logger.extension(gatherer.plugin_name).pass_crashed(str(subject), e)
            return None

    def close(self) -> None:
        """Release the provider threads of every registered extension."""
        for gatherer in self._gatherers.values():
            gatherer.close()

    async def update_player_values(
        self, player_uuid: UUID, player_name: str
    ) -> dict[str, GatheringResult]:
        return await self.update_subject(PlayerSubject(uuid=player_uuid, name=player_name))

    async def update_server_values(self) -> dict[str, GatheringResult]:
        return await self.update_subject(ServerSubject(server_uuid=self._server_uuid))

    async def update_group_values(self, group: Group) -> dict[str, GatheringResult]:
        return await self.update_subject(GroupSubject(group=group))


# The one service instance owned by the application
_extension_service: ExtensionService | None = None


def get_extension_service() -> ExtensionService:
    """Get the current extension service.

    Raises:
        RuntimeError: If no service has been set
    """
    if _extension_service is None:
        raise RuntimeError("Extension service not initialized")
    return _extension_service


def set_extension_service(service: ExtensionService) -> None:
    """Set the extension service (called by the application at startup)."""
    global _extension_service
    _extension_service = service


def reset_extension_service() -> None:
    """Reset the extension service (for shutdown and testing)."""
    global _extension_service
    _extension_service = None
