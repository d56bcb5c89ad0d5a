"""Tests for the immutable metadata model."""

import pytest

from plan_extensions.extractor import (
    ExtensionDescriptor,
    Icon,
    ProviderDescriptor,
    TabDescriptor,
    truncate,
)
from plan_extensions.types import Color, ElementOrder, Family, SubjectShape, ValueKind


class TestTruncate:
    def test_short_value_unchanged(self):
        assert truncate("abc") == ("abc", False)

    def test_exactly_limit_unchanged(self):
        assert truncate("a" * 50) == ("a" * 50, False)

    def test_cut_to_limit(self):
        assert truncate("a" * 51) == ("a" * 50, True)

    def test_custom_limit(self):
        assert truncate("abcdef", 3) == ("abc", True)


class TestProviderDescriptor:
    def test_defaults(self):
        provider = ProviderDescriptor(
            name="kills",
            method_name="kills",
            value_kind=ValueKind.NUMBER,
            subject_shape=SubjectShape.PLAYER,
        )
        assert provider.icon == Icon()
        assert not provider.is_gated
        assert provider.condition_name is None

    def test_name_over_limit(self):
        with pytest.raises(ValueError, match="over 50"):
            ProviderDescriptor(
                name="a" * 51,
                method_name="a" * 51,
                value_kind=ValueKind.NUMBER,
                subject_shape=SubjectShape.SERVER,
            )

    def test_description_limit(self):
        ProviderDescriptor(
            name="kills",
            method_name="kills",
            value_kind=ValueKind.NUMBER,
            subject_shape=SubjectShape.SERVER,
            description="d" * 150,
        )
        with pytest.raises(ValueError):
            ProviderDescriptor(
                name="kills",
                method_name="kills",
                value_kind=ValueKind.NUMBER,
                subject_shape=SubjectShape.SERVER,
                description="d" * 151,
            )

    def test_condition_only_on_boolean(self):
        with pytest.raises(ValueError, match="only boolean"):
            ProviderDescriptor(
                name="kills",
                method_name="kills",
                value_kind=ValueKind.NUMBER,
                subject_shape=SubjectShape.SERVER,
                condition_name="killer",
            )

    def test_enum_types_checked(self):
        with pytest.raises(ValueError):
            ProviderDescriptor(
                name="kills",
                method_name="kills",
                value_kind="number",
                subject_shape=SubjectShape.SERVER,
            )

    def test_immutable(self):
        provider = ProviderDescriptor(
            name="kills",
            method_name="kills",
            value_kind=ValueKind.NUMBER,
            subject_shape=SubjectShape.SERVER,
        )
        with pytest.raises(AttributeError):
            provider.name = "deaths"

    def test_to_dict(self):
        provider = ProviderDescriptor(
            name="is_banned",
            method_name="is_banned",
            value_kind=ValueKind.BOOLEAN,
            subject_shape=SubjectShape.PLAYER,
            text="Banned",
            icon=Icon(name="ban", family=Family.REGULAR, color=Color.RED),
            condition_name="banned",
        )
        data = provider.to_dict()
        assert data["value_kind"] == "boolean"
        assert data["subject_shape"] == "player"
        assert data["icon"] == {"name": "ban", "family": "regular", "color": "red"}
        assert data["condition_name"] == "banned"


class TestExtensionDescriptor:
    def _descriptor(self) -> ExtensionDescriptor:
        return ExtensionDescriptor(
            plugin_name="LiteBans",
            providers=(
                ProviderDescriptor(
                    name="is_banned",
                    method_name="is_banned",
                    value_kind=ValueKind.BOOLEAN,
                    subject_shape=SubjectShape.PLAYER,
                    condition_name="banned",
                ),
                ProviderDescriptor(
                    name="total",
                    method_name="total",
                    value_kind=ValueKind.NUMBER,
                    subject_shape=SubjectShape.SERVER,
                ),
            ),
            tabs=(TabDescriptor(name="Bans", element_order=(ElementOrder.GRAPH,)),),
        )

    def test_providers_for(self):
        descriptor = self._descriptor()
        assert [p.name for p in descriptor.providers_for(SubjectShape.PLAYER)] == ["is_banned"]
        assert descriptor.providers_for(SubjectShape.GROUP) == ()

    def test_condition_names(self):
        assert self._descriptor().condition_names == frozenset({"banned"})

    def test_to_dict(self):
        data = self._descriptor().to_dict()
        assert data["plugin_name"] == "LiteBans"
        assert [p["name"] for p in data["providers"]] == ["is_banned", "total"]
        assert data["tabs"][0]["element_order"] == ["graph"]

    def test_empty_name(self):
        with pytest.raises(ValueError):
            ExtensionDescriptor(plugin_name="")
