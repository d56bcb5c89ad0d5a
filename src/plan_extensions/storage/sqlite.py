"""SQLite-based extension store."""

import asyncio
import json
import sqlite3
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

from plan_extensions.extractor.metadata import ExtensionDescriptor
from plan_extensions.types import ValueKind

from .base import ExtensionStore
from .types import ExtensionValue, SubjectKey

T = TypeVar("T")


class SQLiteExtensionStore(ExtensionStore):
    """SQLite-based extension store.

    Persists data to disk. All statements run on a single worker thread.
    """

    def __init__(self, db_path: str) -> None:
        """Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self._db_path = db_path
        self._executor = ThreadPoolExecutor(max_workers=1)
        self._conn: sqlite3.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _init_db(self) -> None:
        """Initialize SQLite database schema."""
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS extension_plugins (
                plugin_name TEXT PRIMARY KEY,
                icon TEXT NOT NULL,
                color TEXT NOT NULL,
                tabs TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS extension_providers (
                plugin_name TEXT NOT NULL REFERENCES extension_plugins(plugin_name) ON DELETE CASCADE,
                provider_name TEXT NOT NULL,
                position INTEGER NOT NULL,
                data TEXT NOT NULL,
                PRIMARY KEY (plugin_name, provider_name)
            );

            CREATE TABLE IF NOT EXISTS extension_values (
                plugin_name TEXT NOT NULL,
                provider_name TEXT NOT NULL,
                subject_kind TEXT NOT NULL,
                subject_id TEXT NOT NULL,
                value_kind TEXT NOT NULL,
                value TEXT NOT NULL,
                gathered_at TEXT NOT NULL,
                PRIMARY KEY (plugin_name, provider_name, subject_kind, subject_id)
            );

            CREATE INDEX IF NOT EXISTS idx_values_subject
                ON extension_values(plugin_name, subject_kind, subject_id);
        """
        )
        self._conn.commit()

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("SQLite extension store is closed")
        return self._conn

    # Metadata

    async def store_extension_metadata(self, descriptor: ExtensionDescriptor) -> None:
        await self._run(self._store_metadata_sync, descriptor)

    def _store_metadata_sync(self, descriptor: ExtensionDescriptor) -> None:
        conn = self._connection()
        with conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO extension_plugins (
                    plugin_name, icon, color, tabs, updated_at
                ) VALUES (?, ?, ?, ?, ?)
            """,
                (
                    descriptor.plugin_name,
                    json.dumps(descriptor.icon.to_dict()),
                    descriptor.color.value,
                    json.dumps([tab.to_dict() for tab in descriptor.tabs]),
                    datetime.now(UTC).isoformat(),
                ),
            )
            # Overwrite, not append: providers removed from the class disappear
            conn.execute(
                "DELETE FROM extension_providers WHERE plugin_name = ?",
                (descriptor.plugin_name,),
            )
            conn.executemany(
                """
                INSERT INTO extension_providers (plugin_name, provider_name, position, data)
                VALUES (?, ?, ?, ?)
            """,
                [
                    (descriptor.plugin_name, provider.name, position, json.dumps(provider.to_dict()))
                    for position, provider in enumerate(descriptor.providers)
                ],
            )

    async def get_extension_metadata(self, plugin_name: str) -> dict[str, Any] | None:
        return await self._run(self._get_metadata_sync, plugin_name)

    def _get_metadata_sync(self, plugin_name: str) -> dict[str, Any] | None:
        conn = self._connection()
        row = conn.execute(
            "SELECT * FROM extension_plugins WHERE plugin_name = ?", (plugin_name,)
        ).fetchone()
        if row is None:
            return None
        providers = conn.execute(
            "SELECT data FROM extension_providers WHERE plugin_name = ? ORDER BY position",
            (plugin_name,),
        ).fetchall()
        return {
            "plugin_name": row["plugin_name"],
            "icon": json.loads(row["icon"]),
            "color": row["color"],
            "providers": [json.loads(provider["data"]) for provider in providers],
            "tabs": json.loads(row["tabs"]),
        }

    async def list_extensions(self) -> list[str]:
        return await self._run(self._list_extensions_sync)

    def _list_extensions_sync(self) -> list[str]:
        rows = self._connection().execute(
            "SELECT plugin_name FROM extension_plugins ORDER BY plugin_name"
        ).fetchall()
        return [row["plugin_name"] for row in rows]

    # Values

    async def store_value(
        self,
        plugin_name: str,
        provider_name: str,
        subject: SubjectKey,
        value: ExtensionValue,
    ) -> None:
        await self._run(self._store_value_sync, plugin_name, provider_name, subject, value)

    def _store_value_sync(
        self,
        plugin_name: str,
        provider_name: str,
        subject: SubjectKey,
        value: ExtensionValue,
    ) -> None:
        conn = self._connection()
        with conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO extension_values (
                    plugin_name, provider_name, subject_kind, subject_id,
                    value_kind, value, gathered_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    plugin_name,
                    provider_name,
                    subject.kind,
                    subject.identifier,
                    value.kind.value,
                    json.dumps(value.value),
                    value.gathered_at.isoformat(),
                ),
            )

    async def get_value(
        self, plugin_name: str, provider_name: str, subject: SubjectKey
    ) -> ExtensionValue | None:
        return await self._run(self._get_value_sync, plugin_name, provider_name, subject)

    def _get_value_sync(
        self, plugin_name: str, provider_name: str, subject: SubjectKey
    ) -> ExtensionValue | None:
        row = self._connection().execute(
            """
            SELECT value_kind, value, gathered_at FROM extension_values
            WHERE plugin_name = ? AND provider_name = ? AND subject_kind = ? AND subject_id = ?
        """,
            (plugin_name, provider_name, subject.kind, subject.identifier),
        ).fetchone()
        return self._row_to_value(row) if row else None

    async def list_values(self, plugin_name: str, subject: SubjectKey) -> dict[str, ExtensionValue]:
        return await self._run(self._list_values_sync, plugin_name, subject)

    def _list_values_sync(self, plugin_name: str, subject: SubjectKey) -> dict[str, ExtensionValue]:
        rows = self._connection().execute(
            """
            SELECT provider_name, value_kind, value, gathered_at FROM extension_values
            WHERE plugin_name = ? AND subject_kind = ? AND subject_id = ?
        """,
            (plugin_name, subject.kind, subject.identifier),
        ).fetchall()
        return {row["provider_name"]: self._row_to_value(row) for row in rows}

    async def remove_providers(self, plugin_name: str, provider_names: Iterable[str]) -> int:
        return await self._run(self._remove_providers_sync, plugin_name, list(provider_names))

    def _remove_providers_sync(self, plugin_name: str, provider_names: list[str]) -> int:
        if not provider_names:
            return 0
        conn = self._connection()
        placeholders = ", ".join("?" for _ in provider_names)
        with conn:
            conn.execute(
                f"DELETE FROM extension_providers WHERE plugin_name = ? "
                f"AND provider_name IN ({placeholders})",
                (plugin_name, *provider_names),
            )
            cursor = conn.execute(
                f"DELETE FROM extension_values WHERE plugin_name = ? "
                f"AND provider_name IN ({placeholders})",
                (plugin_name, *provider_names),
            )
        return cursor.rowcount

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
        self._executor.shutdown(wait=False)

    def _row_to_value(self, row: sqlite3.Row) -> ExtensionValue:
        return ExtensionValue(
            kind=ValueKind(row["value_kind"]),
            value=json.loads(row["value"]),
            gathered_at=datetime.fromisoformat(row["gathered_at"]),
        )
