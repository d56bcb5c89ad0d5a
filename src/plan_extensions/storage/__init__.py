"""Extension storage - metadata and gathered values."""

from .base import ExtensionStore, create_store
from .memory import MemoryExtensionStore
from .sqlite import SQLiteExtensionStore
from .types import ExtensionValue, SubjectKey

__all__ = [
    "ExtensionStore",
    "MemoryExtensionStore",
    "SQLiteExtensionStore",
    "ExtensionValue",
    "SubjectKey",
    "create_store",
]
