"""In-memory extension store."""

import asyncio
import copy
from collections.abc import Iterable
from typing import Any

from plan_extensions.extractor.metadata import ExtensionDescriptor

from .base import ExtensionStore
from .types import ExtensionValue, SubjectKey


class MemoryExtensionStore(ExtensionStore):
    """In-memory extension store.

    Data is lost on restart. Suitable for development/testing.
    """

    def __init__(self) -> None:
        self._metadata: dict[str, dict[str, Any]] = {}
        self._values: dict[tuple[str, str, SubjectKey], ExtensionValue] = {}
        self._lock = asyncio.Lock()

    async def store_extension_metadata(self, descriptor: ExtensionDescriptor) -> None:
        async with self._lock:
            self._metadata[descriptor.plugin_name] = descriptor.to_dict()

    async def get_extension_metadata(self, plugin_name: str) -> dict[str, Any] | None:
        metadata = self._metadata.get(plugin_name)
        return copy.deepcopy(metadata) if metadata is not None else None

    async def list_extensions(self) -> list[str]:
        return sorted(self._metadata)

    async def store_value(
        self,
        plugin_name: str,
        provider_name: str,
        subject: SubjectKey,
        value: ExtensionValue,
    ) -> None:
        async with self._lock:
            self._values[(plugin_name, provider_name, subject)] = value

    async def get_value(
        self, plugin_name: str, provider_name: str, subject: SubjectKey
    ) -> ExtensionValue | None:
        return self._values.get((plugin_name, provider_name, subject))

    async def list_values(self, plugin_name: str, subject: SubjectKey) -> dict[str, ExtensionValue]:
        return {
            provider: value
            for (plugin, provider, key), value in self._values.items()
            if plugin == plugin_name and key == subject
        }

    async def remove_providers(self, plugin_name: str, provider_names: Iterable[str]) -> int:
        names = set(provider_names)
        async with self._lock:
            metadata = self._metadata.get(plugin_name)
            if metadata is not None:
                metadata["providers"] = [
                    p for p in metadata["providers"] if p["name"] not in names
                ]
            stale = [
                key for key in self._values if key[0] == plugin_name and key[1] in names
            ]
            for key in stale:
                del self._values[key]
            return len(stale)
