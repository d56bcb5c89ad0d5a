"""Extension store abstract base class and factory."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .types import ExtensionValue, SubjectKey

if TYPE_CHECKING:
    from plan_extensions.config.models import StorageConfig
    from plan_extensions.extractor.metadata import ExtensionDescriptor


class ExtensionStore(ABC):
    """Abstract interface for extension metadata and value storage.

    Implementations:
    - MemoryExtensionStore: In-memory, lost on restart
    - SQLiteExtensionStore: SQLite file-based persistence

    Writes to one key never affect another key; writing the same key again
    replaces the previous content.
    """

    @abstractmethod
    async def store_extension_metadata(self, descriptor: "ExtensionDescriptor") -> None:
        """Store (overwrite) the static metadata of an extension.

        Args:
            descriptor: Extension metadata with providers and tabs
        """
        ...

    @abstractmethod
    async def get_extension_metadata(self, plugin_name: str) -> dict[str, Any] | None:
        """Get stored metadata of an extension in its serialized form.

        Args:
            plugin_name: Extension name

        Returns:
            Metadata dict if found, None otherwise
        """
        ...

    @abstractmethod
    async def list_extensions(self) -> list[str]:
        """List names of extensions with stored metadata."""
        ...

    @abstractmethod
    async def store_value(
        self,
        plugin_name: str,
        provider_name: str,
        subject: SubjectKey,
        value: ExtensionValue,
    ) -> None:
        """Store (overwrite) one provider value for one subject.

        Args:
            plugin_name: Extension name
            provider_name: Provider identifier
            subject: Subject the value is about
            value: Normalized value
        """
        ...

    @abstractmethod
    async def get_value(
        self, plugin_name: str, provider_name: str, subject: SubjectKey
    ) -> ExtensionValue | None:
        """Get one stored value.

        Returns:
            ExtensionValue if found, None otherwise
        """
        ...

    @abstractmethod
    async def list_values(self, plugin_name: str, subject: SubjectKey) -> dict[str, ExtensionValue]:
        """Get all stored values of an extension for a subject, keyed by provider name."""
        ...

    @abstractmethod
    async def remove_providers(self, plugin_name: str, provider_names: Iterable[str]) -> int:
        """Remove metadata and values of the named providers.

        Returns:
            Number of removed values
        """
        ...

    async def close(self) -> None:
        """Release resources held by the store."""
        return None


def create_store(config: "StorageConfig") -> ExtensionStore:
    """Create an extension store from configuration.

    Args:
        config: Storage configuration

    Returns:
        Configured ExtensionStore instance

    Raises:
        ValueError: If the storage type is unknown
    """
    from plan_extensions.types import StorageType

    storage_type = StorageType(config.type)

    if storage_type == StorageType.MEMORY:
        from .memory import MemoryExtensionStore

        return MemoryExtensionStore()

    if storage_type == StorageType.SQLITE:
        from .sqlite import SQLiteExtensionStore

        return SQLiteExtensionStore(config.path)

    raise ValueError(f"Unknown storage type: {config.type}")
