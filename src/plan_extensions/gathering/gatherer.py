"""Runs the providers of one extension for a subject and stores the results."""

import asyncio
import inspect
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from plan_extensions.errors import ErrorFactory, ExtensionError, get_error_factory
from plan_extensions.extension.api import Group
from plan_extensions.extractor.metadata import ExtensionDescriptor, ProviderDescriptor
from plan_extensions.extractor.ordering import order_providers
from plan_extensions.logging import ExtensionLogger, ExtensionScopeLogger
from plan_extensions.storage.base import ExtensionStore
from plan_extensions.types import SubjectShape

from .conditions import ConditionResolver
from .subjects import GroupSubject, PlayerSubject, ServerSubject, Subject
from .values import convert_value

logger = logging.getLogger(__name__)

# Worker threads per extension for blocking providers
PROVIDER_WORKERS = 4


@dataclass
class GatheringResult:
    """Outcome of one gathering pass.

    Attributes:
        subject: Subject key the pass ran for
        stored: Names of providers whose value was stored
        skipped: Names of providers whose condition was not met
        failed: Classified failures, one per failing provider
        conditions: Conditions recorded during the pass
    """

    subject: str
    stored: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[ExtensionError] = field(default_factory=list)
    conditions: dict[str, bool] = field(default_factory=dict)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed


class ProviderValueGatherer:
    """Gathers values of one registered extension.

    A pass never raises for a provider failure: each failure is classified,
    logged with the extension, provider and subject, and the pass moves on
    to the next provider.
    """

    def __init__(
        self,
        extension: Any,
        descriptor: ExtensionDescriptor,
        store: ExtensionStore,
        server_uuid: str,
        logger: ExtensionLogger | None = None,
        provider_timeout: float = 10.0,
        error_factory: ErrorFactory | None = None,
    ):
        """Initialize gatherer.

        Args:
            extension: Extension instance the providers are called on
            descriptor: Validated metadata of the extension
            store: Where values and metadata go
            server_uuid: Identity of the server for server providers
            logger: Extension logger (defaults to a new ExtensionLogger)
            provider_timeout: Seconds a provider may take, 0 for no limit
            error_factory: Error factory (defaults to the shared one)
        """
        self.extension = extension
        self.descriptor = descriptor
        self._store = store
        self._server_uuid = server_uuid
        self._log: ExtensionScopeLogger = (logger or ExtensionLogger()).extension(
            descriptor.plugin_name
        )
        self._timeout = provider_timeout
        self._errors = error_factory or get_error_factory()
        # Own pool: stalled threads of this extension never delay another one
        self._executor = ThreadPoolExecutor(
            max_workers=PROVIDER_WORKERS,
            thread_name_prefix=f"provider-{descriptor.plugin_name}",
        )

        self._ordered: dict[SubjectShape, tuple[ProviderDescriptor, ...]] = {}
        for shape in SubjectShape:
            ordered, unplaced = order_providers(descriptor.providers_for(shape))
            if unplaced:
                logger.debug(
                    f"{descriptor.plugin_name}: {len(unplaced)} {shape.value} providers "
                    f"sit on a condition cycle and are never run"
                )
            self._ordered[shape] = tuple(ordered)

    @property
    def plugin_name(self) -> str:
        return self.descriptor.plugin_name

    def providers_for(self, shape: SubjectShape) -> tuple[ProviderDescriptor, ...]:
        """Providers of a subject shape in the order a pass calls them."""
        return self._ordered[shape]

    async def update_player_values(self, player_uuid: UUID, player_name: str) -> GatheringResult:
        return await self.run(PlayerSubject(uuid=player_uuid, name=player_name))

    async def update_server_values(self) -> GatheringResult:
        return await self.run(ServerSubject(server_uuid=self._server_uuid))

    async def update_group_values(self, group: Group) -> GatheringResult:
        return await self.run(GroupSubject(group=group))

    async def run(self, subject: Subject) -> GatheringResult:
        """Run one gathering pass.

        Providers run one after another. Gated providers whose condition
        is not satisfied are skipped.

        Args:
            subject: Player, group or server to gather for

        Returns:
            GatheringResult of the pass
        """
        started = time.monotonic()
        key = subject.key
        result = GatheringResult(subject=str(key))
        conditions = ConditionResolver()

        for provider in self._ordered[subject.shape]:
            if not conditions.is_satisfied(provider.requires_condition):
                result.skipped.append(provider.name)
                self._log.provider_skipped(
                    provider.method_name, str(subject), provider.requires_condition or ""
                )
                continue

            try:
                raw = await self._invoke(provider, subject)
                value = convert_value(provider, raw)
            except (KeyboardInterrupt, asyncio.CancelledError):
                raise
            except BaseException as e:  # noqa: BLE001 - SystemExit stays in the pass too
                error = self._errors.from_exception(
                    e,
                    extension=self.plugin_name,
                    provider=provider.method_name,
                    subject=str(subject),
                )
                result.failed.append(error)
                self._log.provider_failed(provider.method_name, str(subject), error)
                continue

            if provider.condition_name:
                conditions.record(provider.condition_name, bool(value.value))

            try:
                await self._store.store_value(self.plugin_name, provider.name, key, value)
            except Exception as e:
                result.failed.append(
                    self._errors.create(
                        "STORE_WRITE_FAILED",
                        detail=str(e),
                        extension=self.plugin_name,
                        provider=provider.method_name,
                        subject=str(subject),
                        error_type=type(e).__name__,
                    )
                )
                self._log.store_failed(provider.method_name, str(subject), e)
                continue

            result.stored.append(provider.name)

        result.conditions = conditions.as_dict()
        result.duration_ms = int((time.monotonic() - started) * 1000)
        self._log.pass_completed(
            str(subject),
            stored=len(result.stored),
            skipped=len(result.skipped),
            failed=len(result.failed),
            duration_ms=result.duration_ms,
        )
        return result

    async def _invoke(self, provider: ProviderDescriptor, subject: Subject) -> Any:
        method = getattr(self.extension, provider.method_name)
        arguments = subject.arguments_for(provider)
        timeout = self._timeout if self._timeout and self._timeout > 0 else None

        if inspect.iscoroutinefunction(method):
            call = method(*arguments)
        else:
            # Blocking providers run on a worker thread. A timed out thread is
            # abandoned, not interrupted.
            loop = asyncio.get_running_loop()
            call = loop.run_in_executor(self._executor, method, *arguments)

        # Awaited in this task, so whatever the provider raises reaches run()
        try:
            async with asyncio.timeout(timeout):
                return await call
        except TimeoutError as e:
            raise self._errors.create(
                "PROVIDER_TIMEOUT",
                timeout_seconds=self._timeout,
                error_type=type(e).__name__,
            ) from e

    async def store_extension_information(self) -> None:
        """Store the extension's metadata, replacing what was stored before.

        Stored data of methods listed with ``@invalidate_method`` is removed.

        Raises:
            Exception: Whatever the store raises
        """
        await self._store.store_extension_metadata(self.descriptor)
        if self.descriptor.invalidated_methods:
            removed = await self._store.remove_providers(
                self.plugin_name, self.descriptor.invalidated_methods
            )
            logger.debug(
                f"Removed {removed} values of invalidated methods "
                f"{list(self.descriptor.invalidated_methods)} of {self.plugin_name}"
            )
        self._log.metadata_stored()

    def close(self) -> None:
        """Release the provider worker threads without waiting for stalled calls."""
        self._executor.shutdown(wait=False, cancel_futures=True)
