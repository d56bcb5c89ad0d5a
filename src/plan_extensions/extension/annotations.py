"""Decorators that declare an extension's identity and providers.

The decorators only attach declaration objects to the class or function.
Nothing is validated here; ``DataProviderExtractor`` reads the declarations
and reports mistakes.

Usage:
    @plugin_info(name="LiteBans", icon_name="ban", color=Color.RED)
    class LiteBansExtension(DataExtension):

        @boolean_provider(text="Banned", condition_name="banned")
        def is_banned(self, player_uuid: UUID) -> bool:
            ...

        @conditional("banned")
        @string_provider(text="Ban reason")
        def ban_reason(self, player_uuid: UUID) -> str:
            ...
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from plan_extensions.types import Color, ElementOrder, Family, FormatType, ValueKind

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)

PLUGIN_INFO_ATTR = "__extension_plugin_info__"
TAB_INFO_ATTR = "__extension_tab_info__"
TAB_ORDER_ATTR = "__extension_tab_order__"
INVALIDATE_ATTR = "__extension_invalidated_methods__"
PROVIDER_ATTR = "__extension_provider__"
CONDITIONAL_ATTR = "__extension_conditional__"
TAB_ATTR = "__extension_tab__"

DEFAULT_ELEMENT_ORDER = (ElementOrder.VALUES, ElementOrder.TABLE, ElementOrder.GRAPH)


@dataclass(frozen=True)
class PluginInfo:
    """Class-level identity of an extension."""

    name: str
    icon_name: str = "cube"
    icon_family: Family = Family.SOLID
    color: Color = Color.NONE


@dataclass(frozen=True)
class ProviderDeclaration:
    """Provider decorator arguments, one per decorated method."""

    kind: ValueKind
    text: str | None = None
    description: str = ""
    priority: int = 0
    icon_name: str = "question"
    icon_family: Family = Family.SOLID
    icon_color: Color = Color.NONE
    show_in_players_table: bool = False
    condition_name: str | None = None  # boolean only
    hidden: bool = False  # boolean only
    format_type: FormatType = FormatType.NONE  # number only
    player_name: bool = False  # string only


@dataclass(frozen=True)
class TabInfoDeclaration:
    """Presentation details of a tab."""

    tab: str
    icon_name: str = "circle"
    icon_family: Family = Family.SOLID
    element_order: tuple[ElementOrder, ...] = DEFAULT_ELEMENT_ORDER


def plugin_info(
    name: str,
    icon_name: str = "cube",
    icon_family: Family = Family.SOLID,
    color: Color = Color.NONE,
) -> Callable[[C], C]:
    """Declare the identity of a DataExtension class."""

    def decorator(cls: C) -> C:
        setattr(cls, PLUGIN_INFO_ATTR, PluginInfo(name, icon_name, icon_family, color))
        return cls

    return decorator


def tab_info(
    tab: str,
    icon_name: str = "circle",
    icon_family: Family = Family.SOLID,
    element_order: tuple[ElementOrder, ...] | list[ElementOrder] | None = None,
) -> Callable[[C], C]:
    """Describe how a tab is presented. May be stacked for several tabs."""

    def decorator(cls: C) -> C:
        declaration = TabInfoDeclaration(
            tab=tab,
            icon_name=icon_name,
            icon_family=icon_family,
            element_order=tuple(element_order) if element_order else DEFAULT_ELEMENT_ORDER,
        )
        own = list(vars(cls).get(TAB_INFO_ATTR, ()))
        # Decorators apply bottom-up; prepend to keep source order
        own.insert(0, declaration)
        setattr(cls, TAB_INFO_ATTR, tuple(own))
        return cls

    return decorator


def tab_order(*tabs: str) -> Callable[[C], C]:
    """Declare the preferred order of tabs."""

    def decorator(cls: C) -> C:
        setattr(cls, TAB_ORDER_ATTR, tuple(tabs))
        return cls

    return decorator


def invalidate_method(*method_names: str) -> Callable[[C], C]:
    """List old provider method names whose stored values should be removed."""

    def decorator(cls: C) -> C:
        own = list(vars(cls).get(INVALIDATE_ATTR, ()))
        setattr(cls, INVALIDATE_ATTR, tuple(list(method_names) + own))
        return cls

    return decorator


def conditional(condition: str) -> Callable[[F], F]:
    """Only call the provider when the named condition is true."""

    def decorator(func: F) -> F:
        setattr(func, CONDITIONAL_ATTR, condition)
        return func

    return decorator


def tab(name: str) -> Callable[[F], F]:
    """Place the provider's value on the named tab."""

    def decorator(func: F) -> F:
        setattr(func, TAB_ATTR, name)
        return func

    return decorator


def _provider(declaration: ProviderDeclaration) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        setattr(func, PROVIDER_ATTR, declaration)
        return func

    return decorator


def boolean_provider(
    text: str | None = None,
    description: str = "",
    priority: int = 0,
    icon_name: str = "question",
    icon_family: Family = Family.SOLID,
    icon_color: Color = Color.NONE,
    show_in_players_table: bool = False,
    condition_name: str | None = None,
    hidden: bool = False,
) -> Callable[[F], F]:
    """Declare a provider of ``bool`` values.

    Args:
        condition_name: Publish the value as a condition for ``@conditional``
        hidden: Only use the value as a condition, do not display it
    """
    return _provider(
        ProviderDeclaration(
            kind=ValueKind.BOOLEAN,
            text=text,
            description=description,
            priority=priority,
            icon_name=icon_name,
            icon_family=icon_family,
            icon_color=icon_color,
            show_in_players_table=show_in_players_table,
            condition_name=condition_name,
            hidden=hidden,
        )
    )


def number_provider(
    text: str | None = None,
    description: str = "",
    priority: int = 0,
    icon_name: str = "question",
    icon_family: Family = Family.SOLID,
    icon_color: Color = Color.NONE,
    show_in_players_table: bool = False,
    format_type: FormatType = FormatType.NONE,
) -> Callable[[F], F]:
    """Declare a provider of ``int`` values."""
    return _provider(
        ProviderDeclaration(
            kind=ValueKind.NUMBER,
            text=text,
            description=description,
            priority=priority,
            icon_name=icon_name,
            icon_family=icon_family,
            icon_color=icon_color,
            show_in_players_table=show_in_players_table,
            format_type=format_type,
        )
    )


def double_provider(
    text: str | None = None,
    description: str = "",
    priority: int = 0,
    icon_name: str = "question",
    icon_family: Family = Family.SOLID,
    icon_color: Color = Color.NONE,
    show_in_players_table: bool = False,
) -> Callable[[F], F]:
    """Declare a provider of ``float`` values."""
    return _provider(
        ProviderDeclaration(
            kind=ValueKind.DOUBLE,
            text=text,
            description=description,
            priority=priority,
            icon_name=icon_name,
            icon_family=icon_family,
            icon_color=icon_color,
            show_in_players_table=show_in_players_table,
        )
    )


def percentage_provider(
    text: str | None = None,
    description: str = "",
    priority: int = 0,
    icon_name: str = "question",
    icon_family: Family = Family.SOLID,
    icon_color: Color = Color.NONE,
    show_in_players_table: bool = False,
) -> Callable[[F], F]:
    """Declare a provider of percentages as ``float`` between 0.0 and 1.0."""
    return _provider(
        ProviderDeclaration(
            kind=ValueKind.PERCENTAGE,
            text=text,
            description=description,
            priority=priority,
            icon_name=icon_name,
            icon_family=icon_family,
            icon_color=icon_color,
            show_in_players_table=show_in_players_table,
        )
    )


def string_provider(
    text: str | None = None,
    description: str = "",
    priority: int = 0,
    icon_name: str = "question",
    icon_family: Family = Family.SOLID,
    icon_color: Color = Color.NONE,
    show_in_players_table: bool = False,
    player_name: bool = False,
) -> Callable[[F], F]:
    """Declare a provider of ``str`` values.

    Args:
        player_name: The value is a player name and may be linked to that player
    """
    return _provider(
        ProviderDeclaration(
            kind=ValueKind.STRING,
            text=text,
            description=description,
            priority=priority,
            icon_name=icon_name,
            icon_family=icon_family,
            icon_color=icon_color,
            show_in_players_table=show_in_players_table,
            player_name=player_name,
        )
    )
