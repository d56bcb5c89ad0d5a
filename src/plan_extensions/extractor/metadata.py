"""Immutable metadata describing an extension and the values it provides."""

from dataclasses import dataclass, field

from plan_extensions.extension.annotations import DEFAULT_ELEMENT_ORDER
from plan_extensions.types import (
    Color,
    ElementOrder,
    Family,
    FormatType,
    ParameterRole,
    SubjectShape,
    ValueKind,
)

MAX_IDENTIFIER_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 150


def truncate(value: str, limit: int = MAX_IDENTIFIER_LENGTH) -> tuple[str, bool]:
    """Cut a string to its first ``limit`` characters.

    Returns:
        Tuple of (truncated value, whether it changed)
    """
    if len(value) <= limit:
        return value, False
    return value[:limit], True


def _check_length(field_name: str, value: str | None, limit: int) -> None:
    if value is not None and len(value) > limit:
        raise ValueError(f"{field_name} is over {limit} characters: {value!r}")


@dataclass(frozen=True)
class Icon:
    """Icon shown next to a value, tab or plugin name."""

    name: str = "question"
    family: Family = Family.SOLID
    color: Color = Color.NONE

    def __post_init__(self) -> None:
        _check_length("icon name", self.name, MAX_IDENTIFIER_LENGTH)

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "family": self.family.value, "color": self.color.value}


@dataclass(frozen=True)
class ProviderDescriptor:
    """One value-producing operation of an extension.

    Attributes:
        name: Storage identifier, the method name cut to 50 characters
        method_name: Attribute looked up on the extension instance at call time
        value_kind: Kind of the produced value
        subject_shape: What the value is about
        parameters: Role of each positional parameter, in call order
        condition_name: Condition the (boolean) result is published under
        requires_condition: Condition that must be true for the provider to run
        declaration_index: Position in the class body, used for stable ordering
    """

    name: str
    method_name: str
    value_kind: ValueKind
    subject_shape: SubjectShape
    parameters: tuple[ParameterRole, ...] = ()
    text: str = ""
    description: str = ""
    priority: int = 0
    icon: Icon = field(default_factory=Icon)
    show_in_players_table: bool = False
    condition_name: str | None = None
    requires_condition: str | None = None
    hidden: bool = False
    tab: str | None = None
    format_type: FormatType = FormatType.NONE
    player_name: bool = False
    declaration_index: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.value_kind, ValueKind):
            raise ValueError(f"value_kind must be a ValueKind, got {self.value_kind!r}")
        if not isinstance(self.subject_shape, SubjectShape):
            raise ValueError(f"subject_shape must be a SubjectShape, got {self.subject_shape!r}")
        if not self.name:
            raise ValueError("provider name can not be empty")
        _check_length("name", self.name, MAX_IDENTIFIER_LENGTH)
        _check_length("text", self.text, MAX_IDENTIFIER_LENGTH)
        _check_length("description", self.description, MAX_DESCRIPTION_LENGTH)
        _check_length("condition_name", self.condition_name, MAX_IDENTIFIER_LENGTH)
        _check_length("requires_condition", self.requires_condition, MAX_IDENTIFIER_LENGTH)
        _check_length("tab", self.tab, MAX_IDENTIFIER_LENGTH)
        if self.condition_name is not None and self.value_kind != ValueKind.BOOLEAN:
            raise ValueError("only boolean providers can provide a condition")

    @property
    def is_gated(self) -> bool:
        return self.requires_condition is not None

    def to_dict(self) -> dict[str, object]:
        """Serialize for storage."""
        return {
            "name": self.name,
            "method_name": self.method_name,
            "value_kind": self.value_kind.value,
            "subject_shape": self.subject_shape.value,
            "parameters": [role.value for role in self.parameters],
            "text": self.text,
            "description": self.description,
            "priority": self.priority,
            "icon": self.icon.to_dict(),
            "show_in_players_table": self.show_in_players_table,
            "condition_name": self.condition_name,
            "requires_condition": self.requires_condition,
            "hidden": self.hidden,
            "tab": self.tab,
            "format_type": self.format_type.value,
            "player_name": self.player_name,
        }


@dataclass(frozen=True)
class TabDescriptor:
    """Display grouping of provider values."""

    name: str
    icon: Icon = field(default_factory=lambda: Icon(name="circle"))
    element_order: tuple[ElementOrder, ...] = DEFAULT_ELEMENT_ORDER
    tab_priority: int = 0

    def __post_init__(self) -> None:
        _check_length("tab name", self.name, MAX_IDENTIFIER_LENGTH)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "icon": self.icon.to_dict(),
            "element_order": [order.value for order in self.element_order],
            "tab_priority": self.tab_priority,
        }


@dataclass(frozen=True)
class ExtensionDescriptor:
    """Validated metadata graph of one extension."""

    plugin_name: str
    icon: Icon = field(default_factory=lambda: Icon(name="cube"))
    color: Color = Color.NONE
    providers: tuple[ProviderDescriptor, ...] = ()
    tabs: tuple[TabDescriptor, ...] = ()
    invalidated_methods: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.plugin_name:
            raise ValueError("plugin name can not be empty")
        _check_length("plugin name", self.plugin_name, MAX_IDENTIFIER_LENGTH)

    def providers_for(self, shape: SubjectShape) -> tuple[ProviderDescriptor, ...]:
        """Providers about the given kind of subject, in declaration order."""
        return tuple(p for p in self.providers if p.subject_shape == shape)

    @property
    def condition_names(self) -> frozenset[str]:
        return frozenset(p.condition_name for p in self.providers if p.condition_name)

    def to_dict(self) -> dict[str, object]:
        """Serialize for storage."""
        return {
            "plugin_name": self.plugin_name,
            "icon": self.icon.to_dict(),
            "color": self.color.value,
            "providers": [p.to_dict() for p in self.providers],
            "tabs": [t.to_dict() for t in self.tabs],
        }
