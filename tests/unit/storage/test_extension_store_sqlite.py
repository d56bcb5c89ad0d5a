"""Tests for the SQLite extension store."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from plan_extensions.extractor import ExtensionDescriptor, Icon, ProviderDescriptor, TabDescriptor
from plan_extensions.storage import ExtensionValue, SQLiteExtensionStore, SubjectKey
from plan_extensions.types import Color, SubjectShape, ValueKind

PLAYER = SubjectKey("player", "069a79f4-44e9-4726-a5be-fca90e38aaf5")
SERVER = SubjectKey("server", "server-1")


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Create a temporary database path."""
    return str(tmp_path / "data" / "extensions.db")


@pytest.fixture
def store(db_path: str) -> SQLiteExtensionStore:
    """Create a SQLite store for testing."""
    return SQLiteExtensionStore(db_path=db_path)


def _descriptor(*names: str) -> ExtensionDescriptor:
    return ExtensionDescriptor(
        plugin_name="LiteBans",
        icon=Icon(name="ban"),
        color=Color.RED,
        providers=tuple(
            ProviderDescriptor(
                name=name,
                method_name=name,
                value_kind=ValueKind.BOOLEAN,
                subject_shape=SubjectShape.PLAYER,
                condition_name=name,
            )
            for name in names
        ),
        tabs=(TabDescriptor(name="Bans"),),
    )


class TestSQLiteExtensionStore:
    """Test SQLiteExtensionStore."""

    @pytest.mark.asyncio
    async def test_metadata_round_trip(self, store: SQLiteExtensionStore) -> None:
        descriptor = _descriptor("banned", "muted")
        await store.store_extension_metadata(descriptor)

        assert await store.get_extension_metadata("LiteBans") == descriptor.to_dict()

    @pytest.mark.asyncio
    async def test_metadata_overwrite(self, store: SQLiteExtensionStore) -> None:
        await store.store_extension_metadata(_descriptor("banned", "muted"))
        await store.store_extension_metadata(_descriptor("muted"))

        metadata = await store.get_extension_metadata("LiteBans")
        assert [p["name"] for p in metadata["providers"]] == ["muted"]
        assert await store.list_extensions() == ["LiteBans"]

    @pytest.mark.asyncio
    async def test_value_round_trip(self, store: SQLiteExtensionStore) -> None:
        gathered_at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        await store.store_value(
            "LiteBans", "banned", PLAYER, ExtensionValue(ValueKind.BOOLEAN, True, gathered_at)
        )

        value = await store.get_value("LiteBans", "banned", PLAYER)
        assert value == ExtensionValue(ValueKind.BOOLEAN, True, gathered_at)

    @pytest.mark.asyncio
    async def test_last_write_wins(self, store: SQLiteExtensionStore) -> None:
        await store.store_value("LiteBans", "total", SERVER, ExtensionValue(ValueKind.NUMBER, 1))
        await store.store_value("LiteBans", "total", SERVER, ExtensionValue(ValueKind.NUMBER, 2))

        values = await store.list_values("LiteBans", SERVER)
        assert {name: v.value for name, v in values.items()} == {"total": 2}

    @pytest.mark.asyncio
    async def test_missing(self, store: SQLiteExtensionStore) -> None:
        assert await store.get_extension_metadata("Nope") is None
        assert await store.get_value("LiteBans", "banned", PLAYER) is None

    @pytest.mark.asyncio
    async def test_remove_providers(self, store: SQLiteExtensionStore) -> None:
        await store.store_extension_metadata(_descriptor("banned", "old"))
        await store.store_value("LiteBans", "old", PLAYER, ExtensionValue(ValueKind.BOOLEAN, True))
        await store.store_value(
            "LiteBans", "banned", PLAYER, ExtensionValue(ValueKind.BOOLEAN, False)
        )

        assert await store.remove_providers("LiteBans", ["old"]) == 1
        assert await store.remove_providers("LiteBans", []) == 0
        assert list(await store.list_values("LiteBans", PLAYER)) == ["banned"]
        metadata = await store.get_extension_metadata("LiteBans")
        assert [p["name"] for p in metadata["providers"]] == ["banned"]

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, db_path: str) -> None:
        first = SQLiteExtensionStore(db_path)
        await first.store_value("LiteBans", "banned", PLAYER, ExtensionValue(ValueKind.BOOLEAN, True))
        await first.close()

        second = SQLiteExtensionStore(db_path)
        try:
            assert (await second.get_value("LiteBans", "banned", PLAYER)).value is True
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_closed_store(self, db_path: str) -> None:
        store = SQLiteExtensionStore(db_path)
        await store.close()
        with pytest.raises(RuntimeError):
            await store.list_extensions()
