"""Tests for the in-memory extension store."""

import pytest

from plan_extensions.config import StorageConfig
from plan_extensions.extractor import ExtensionDescriptor, ProviderDescriptor
from plan_extensions.storage import (
    ExtensionValue,
    MemoryExtensionStore,
    SQLiteExtensionStore,
    SubjectKey,
    create_store,
)
from plan_extensions.types import StorageType, SubjectShape, ValueKind

PLAYER = SubjectKey("player", "069a79f4-44e9-4726-a5be-fca90e38aaf5")
OTHER_PLAYER = SubjectKey("player", "853c80ef-3c37-49fd-aa49-938b674adae6")


def _descriptor(*names: str) -> ExtensionDescriptor:
    return ExtensionDescriptor(
        plugin_name="LiteBans",
        providers=tuple(
            ProviderDescriptor(
                name=name,
                method_name=name,
                value_kind=ValueKind.NUMBER,
                subject_shape=SubjectShape.PLAYER,
            )
            for name in names
        ),
    )


@pytest.fixture
def store() -> MemoryExtensionStore:
    return MemoryExtensionStore()


class TestMemoryExtensionStore:
    """Test MemoryExtensionStore."""

    @pytest.mark.asyncio
    async def test_metadata_overwrite(self, store: MemoryExtensionStore) -> None:
        await store.store_extension_metadata(_descriptor("kills", "deaths"))
        await store.store_extension_metadata(_descriptor("kills"))

        metadata = await store.get_extension_metadata("LiteBans")
        assert [p["name"] for p in metadata["providers"]] == ["kills"]
        assert await store.list_extensions() == ["LiteBans"]

    @pytest.mark.asyncio
    async def test_metadata_copy(self, store: MemoryExtensionStore) -> None:
        await store.store_extension_metadata(_descriptor("kills"))
        metadata = await store.get_extension_metadata("LiteBans")
        metadata["providers"].clear()

        assert len((await store.get_extension_metadata("LiteBans"))["providers"]) == 1

    @pytest.mark.asyncio
    async def test_missing_metadata(self, store: MemoryExtensionStore) -> None:
        assert await store.get_extension_metadata("Nope") is None

    @pytest.mark.asyncio
    async def test_last_write_wins(self, store: MemoryExtensionStore) -> None:
        await store.store_value("LiteBans", "kills", PLAYER, ExtensionValue(ValueKind.NUMBER, 1))
        await store.store_value("LiteBans", "kills", PLAYER, ExtensionValue(ValueKind.NUMBER, 2))

        assert (await store.get_value("LiteBans", "kills", PLAYER)).value == 2

    @pytest.mark.asyncio
    async def test_keys_independent(self, store: MemoryExtensionStore) -> None:
        await store.store_value("LiteBans", "kills", PLAYER, ExtensionValue(ValueKind.NUMBER, 1))
        await store.store_value(
            "LiteBans", "kills", OTHER_PLAYER, ExtensionValue(ValueKind.NUMBER, 5)
        )
        await store.store_value("Essentials", "kills", PLAYER, ExtensionValue(ValueKind.NUMBER, 9))

        assert (await store.get_value("LiteBans", "kills", PLAYER)).value == 1
        assert list(await store.list_values("LiteBans", PLAYER)) == ["kills"]

    @pytest.mark.asyncio
    async def test_remove_providers(self, store: MemoryExtensionStore) -> None:
        await store.store_extension_metadata(_descriptor("kills", "old"))
        await store.store_value("LiteBans", "old", PLAYER, ExtensionValue(ValueKind.NUMBER, 1))
        await store.store_value("LiteBans", "old", OTHER_PLAYER, ExtensionValue(ValueKind.NUMBER, 1))
        await store.store_value("LiteBans", "kills", PLAYER, ExtensionValue(ValueKind.NUMBER, 1))

        removed = await store.remove_providers("LiteBans", ["old"])

        assert removed == 2
        assert await store.get_value("LiteBans", "old", PLAYER) is None
        assert await store.get_value("LiteBans", "kills", PLAYER) is not None
        metadata = await store.get_extension_metadata("LiteBans")
        assert [p["name"] for p in metadata["providers"]] == ["kills"]


class TestCreateStore:
    def test_memory(self):
        assert isinstance(create_store(StorageConfig()), MemoryExtensionStore)

    @pytest.mark.asyncio
    async def test_sqlite(self, tmp_path):
        store = create_store(
            StorageConfig(type=StorageType.SQLITE, path=str(tmp_path / "ext.db"))
        )
        assert isinstance(store, SQLiteExtensionStore)
        await store.close()

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_store(StorageConfig(type="redis"))


class TestExtensionValue:
    def test_dict_form(self):
        value = ExtensionValue(ValueKind.PERCENTAGE, 1.25)

        data = value.to_dict()

        assert data["kind"] == "percentage"
        assert ExtensionValue.from_dict(data) == value
        assert value.out_of_range
