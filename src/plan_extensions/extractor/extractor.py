"""Builds validated metadata from an extension's declarations.

The extractor reads what the decorators in ``plan_extensions.extension``
attached to the extension class. It never calls a provider.

Hard failures raise ``ExtensionError`` and reject the whole extension.
Soft failures exclude one provider (or drop one detail of it) and are
collected as warnings.
"""

import inspect
import logging
import types
import typing
import uuid
from dataclasses import dataclass, replace
from typing import Any

from plan_extensions.errors import ErrorFactory, ExtensionError, get_error_factory
from plan_extensions.extension.annotations import (
    CONDITIONAL_ATTR,
    INVALIDATE_ATTR,
    PLUGIN_INFO_ATTR,
    PROVIDER_ATTR,
    TAB_ATTR,
    TAB_INFO_ATTR,
    TAB_ORDER_ATTR,
    PluginInfo,
    ProviderDeclaration,
    TabInfoDeclaration,
)
from plan_extensions.extension.api import Group, SimpleGroup
from plan_extensions.types import (
    DanglingConditionPolicy,
    ParameterRole,
    SubjectShape,
    ValueKind,
)

from .metadata import (
    MAX_DESCRIPTION_LENGTH,
    MAX_IDENTIFIER_LENGTH,
    ExtensionDescriptor,
    Icon,
    ProviderDescriptor,
    TabDescriptor,
    truncate,
)
from .ordering import order_providers

logger = logging.getLogger(__name__)

_PRIMITIVE_RETURN_TYPES: dict[ValueKind, tuple[type, ...]] = {
    ValueKind.BOOLEAN: (bool,),
    ValueKind.NUMBER: (int,),
    ValueKind.DOUBLE: (float, int),
    ValueKind.PERCENTAGE: (float, int),
    ValueKind.STRING: (str,),
}

_UUID_NAMES = {"player_uuid", "uuid", "playerUUID"}
_PLAYER_NAME_NAMES = {"player_name", "name", "playerName"}
_GROUP_NAMES = {"group"}


@dataclass
class _MarkedMethod:
    attr_name: str
    function: Any
    declaration: ProviderDeclaration
    index: int


class DataProviderExtractor:
    """Extracts and validates the providers of one extension instance.

    Attributes:
        plugin_name: Name from ``@plugin_info`` (cut to 50 characters)
        descriptor: Validated metadata graph
        warnings: Implementation mistakes that did not reject the extension
    """

    def __init__(
        self,
        extension: Any,
        dangling_condition: DanglingConditionPolicy = DanglingConditionPolicy.IGNORE_GATE,
        error_factory: ErrorFactory | None = None,
    ):
        """Extract metadata from the extension.

        Args:
            extension: Extension instance
            dangling_condition: Policy for ``@conditional`` names nobody provides
            error_factory: Error factory (defaults to the shared one)

        Raises:
            ExtensionError: MISSING_PLUGIN_INFO or NO_PROVIDERS
        """
        self._extension = extension
        self._policy = DanglingConditionPolicy(dangling_condition)
        self._errors = error_factory or get_error_factory()
        self._class_name = type(extension).__name__
        self._name_for_errors = self._class_name
        self.issues: list[ExtensionError] = []
        self.descriptor = self._extract()

    @property
    def plugin_name(self) -> str:
        return self.descriptor.plugin_name

    @property
    def providers(self) -> tuple[ProviderDescriptor, ...]:
        return self.descriptor.providers

    @property
    def tabs(self) -> tuple[TabDescriptor, ...]:
        return self.descriptor.tabs

    @property
    def warnings(self) -> list[str]:
        return [str(issue) for issue in self.issues]

    # Extraction steps

    def _extract(self) -> ExtensionDescriptor:
        info = self._plugin_info()
        plugin_name, changed = truncate(info.name)
        self._name_for_errors = plugin_name
        if changed:
            self._truncated("plugin_info", "name", info.name, plugin_name, MAX_IDENTIFIER_LENGTH)
        icon = Icon(
            name=self._cut("plugin_info", "icon_name", info.icon_name),
            family=info.icon_family,
            color=info.color,
        )

        marked = self._marked_methods()
        if not marked:
            raise self._error("NO_PROVIDERS")

        providers: list[ProviderDescriptor] = []
        seen: set[tuple[SubjectShape, str]] = set()
        for method in marked:
            provider = self._provider(method)
            if provider is None:
                continue
            key = (provider.subject_shape, provider.name)
            if key in seen:
                self._warn("DUPLICATE_IDENTIFIER", provider=method.attr_name, name=provider.name)
                continue
            seen.add(key)
            providers.append(provider)

        providers = self._resolve_conditions(providers)
        if not providers:
            raise self._error(
                "NO_PROVIDERS",
                detail="every provider was excluded because of implementation mistakes",
            )

        descriptor = ExtensionDescriptor(
            plugin_name=plugin_name,
            icon=icon,
            color=info.color,
            providers=tuple(providers),
            tabs=self._tabs(providers),
            invalidated_methods=self._invalidated_methods(),
        )
        logger.debug(
            f"Extracted {len(providers)} providers from {plugin_name} "
            f"({len(self.issues)} warnings)"
        )
        return descriptor

    def _plugin_info(self) -> PluginInfo:
        info = getattr(type(self._extension), PLUGIN_INFO_ATTR, None)
        if not isinstance(info, PluginInfo):
            raise self._error("MISSING_PLUGIN_INFO")
        if not info.name:
            raise self._error("MISSING_PLUGIN_INFO", detail="plugin name can not be empty")
        return info

    def _marked_methods(self) -> list[_MarkedMethod]:
        # Class bodies in MRO order, base classes first; an override keeps the
        # position of the method it overrides.
        members: dict[str, Any] = {}
        for klass in reversed(type(self._extension).__mro__):
            if klass is object:
                continue
            for attr_name, value in vars(klass).items():
                members[attr_name] = value

        marked = []
        for index, (attr_name, value) in enumerate(members.items()):
            function = value.__func__ if isinstance(value, (staticmethod, classmethod)) else value
            declaration = getattr(function, PROVIDER_ATTR, None)
            if isinstance(declaration, ProviderDeclaration):
                marked.append(_MarkedMethod(attr_name, function, declaration, index))
        return marked

    def _provider(self, method: _MarkedMethod) -> ProviderDescriptor | None:
        attr_name = method.attr_name
        declaration = method.declaration

        bound = getattr(self._extension, attr_name, None)
        if attr_name.startswith("_") or not callable(bound):
            self._warn("NOT_PUBLIC", provider=attr_name)
            return None

        try:
            signature = inspect.signature(bound)
        except (TypeError, ValueError) as e:
            self._warn("INVALID_PARAMETER_SHAPE", provider=attr_name, detail=str(e))
            return None

        hints = self._type_hints(method.function)

        shape_and_roles = self._subject_shape(attr_name, signature, hints)
        if shape_and_roles is None:
            return None
        shape, roles = shape_and_roles

        if not self._valid_return_type(attr_name, declaration.kind, hints):
            return None

        name = self._cut(attr_name, "method name", attr_name)
        if declaration.text is None:
            text = name
        else:
            text = self._cut(attr_name, "text", declaration.text)

        condition_name = self._condition(attr_name, "condition_name", declaration.condition_name)
        if condition_name is not None and declaration.kind != ValueKind.BOOLEAN:
            self._warn(
                "ANNOTATION_IGNORED",
                provider=attr_name,
                note=f"provides condition '{condition_name}' but is not a boolean provider",
            )
            condition_name = None

        requires = self._condition(
            attr_name, "conditional", getattr(method.function, CONDITIONAL_ATTR, None)
        )
        if condition_name is not None and condition_name == requires:
            self._warn("SELF_CONDITION", provider=attr_name, condition=condition_name)
            return None

        tab_name = getattr(method.function, TAB_ATTR, None)
        if tab_name is not None:
            tab_name = self._cut(attr_name, "tab", tab_name) or None

        return ProviderDescriptor(
            name=name,
            method_name=attr_name,
            value_kind=declaration.kind,
            subject_shape=shape,
            parameters=roles,
            text=text,
            description=self._cut(
                attr_name, "description", declaration.description, MAX_DESCRIPTION_LENGTH
            ),
            priority=declaration.priority,
            icon=Icon(
                name=self._cut(attr_name, "icon_name", declaration.icon_name),
                family=declaration.icon_family,
                color=declaration.icon_color,
            ),
            show_in_players_table=declaration.show_in_players_table,
            condition_name=condition_name,
            requires_condition=requires,
            hidden=declaration.hidden if declaration.kind == ValueKind.BOOLEAN else False,
            tab=tab_name,
            format_type=declaration.format_type,
            player_name=declaration.player_name,
            declaration_index=method.index,
        )

    def _type_hints(self, function: Any) -> dict[str, Any]:
        try:
            return typing.get_type_hints(function)
        except Exception:  # noqa: BLE001 - unresolvable forward references
            return dict(getattr(function, "__annotations__", {}))

    def _subject_shape(
        self,
        attr_name: str,
        signature: inspect.Signature,
        hints: dict[str, Any],
    ) -> tuple[SubjectShape, tuple[ParameterRole, ...]] | None:
        roles: list[ParameterRole] = []
        for parameter in signature.parameters.values():
            if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
                self._warn(
                    "INVALID_PARAMETER_SHAPE",
                    provider=attr_name,
                    detail=f"variadic parameter '{parameter.name}' is not allowed",
                )
                return None
            role = _parameter_role(parameter.name, hints.get(parameter.name, parameter.annotation))
            if role is None:
                self._warn(
                    "INVALID_PARAMETER_SHAPE",
                    provider=attr_name,
                    detail=f"parameter '{parameter.name}' is not a player UUID, player name or Group",
                )
                return None
            roles.append(role)

        if not roles:
            return SubjectShape.SERVER, ()
        if len(set(roles)) != len(roles):
            self._warn(
                "INVALID_PARAMETER_SHAPE",
                provider=attr_name,
                detail="the same kind of parameter is declared twice",
            )
            return None
        if ParameterRole.GROUP in roles:
            if len(roles) > 1:
                self._warn(
                    "INVALID_PARAMETER_SHAPE",
                    provider=attr_name,
                    detail="a Group parameter can not be combined with player parameters",
                )
                return None
            return SubjectShape.GROUP, tuple(roles)
        return SubjectShape.PLAYER, tuple(roles)

    def _valid_return_type(
        self, attr_name: str, kind: ValueKind, hints: dict[str, Any]
    ) -> bool:
        if "return" not in hints:
            return True
        declared = hints["return"]
        if isinstance(declared, str):
            # Unresolved forward reference, checked at call time instead
            return True

        origin = typing.get_origin(declared)
        if origin is typing.Union or origin is types.UnionType:
            args = typing.get_args(declared)
            if type(None) in args and kind != ValueKind.STRING:
                self._warn(
                    "INVALID_RETURN_TYPE",
                    provider=attr_name,
                    detail=f"returns {declared}, None is not allowed for {kind.value} providers",
                )
                return False
            non_none = [arg for arg in args if arg is not type(None)]
            if len(non_none) == 1:
                declared = non_none[0]

        if not isinstance(declared, type):
            return True

        allowed = _PRIMITIVE_RETURN_TYPES[kind]
        # bool is an int, but not a number value
        if declared is bool and kind != ValueKind.BOOLEAN:
            allowed = ()
        if not issubclass(declared, allowed):
            self._warn(
                "INVALID_RETURN_TYPE",
                provider=attr_name,
                detail=(
                    f"returns {declared.__name__}, "
                    f"expected {_PRIMITIVE_RETURN_TYPES[kind][0].__name__}"
                ),
            )
            return False
        return True

    def _condition(self, attr_name: str, field_name: str, value: str | None) -> str | None:
        if value is None:
            return None
        if not value:
            self._warn(
                "ANNOTATION_IGNORED",
                provider=attr_name,
                note=f"has an empty {field_name}",
            )
            return None
        return self._cut(attr_name, field_name, value)

    def _resolve_conditions(self, providers: list[ProviderDescriptor]) -> list[ProviderDescriptor]:
        """Apply the dangling-condition policy and drop condition cycles.

        Conditions are per subject: a player provider can only be gated on a
        condition published by another player provider.
        """
        reported: set[str] = set()
        while True:
            published = {
                (p.subject_shape, p.condition_name) for p in providers if p.condition_name
            }
            changed = False
            resolved: list[ProviderDescriptor] = []
            for provider in providers:
                requires = provider.requires_condition
                if requires is None or (provider.subject_shape, requires) in published:
                    resolved.append(provider)
                    continue
                if provider.method_name not in reported:
                    reported.add(provider.method_name)
                    self._warn(
                        "DANGLING_CONDITION",
                        provider=provider.method_name,
                        condition=requires,
                    )
                changed = True
                if self._policy == DanglingConditionPolicy.IGNORE_GATE:
                    resolved.append(replace(provider, requires_condition=None))
            providers = resolved

            cyclic: set[str] = set()
            for shape in SubjectShape:
                _, unplaced = order_providers(p for p in providers if p.subject_shape == shape)
                for provider in unplaced:
                    self._warn("CONDITION_CYCLE", provider=provider.method_name)
                    cyclic.add(provider.method_name)
            if cyclic:
                providers = [p for p in providers if p.method_name not in cyclic]
                changed = True

            if not changed:
                return providers

    def _tabs(self, providers: list[ProviderDescriptor]) -> tuple[TabDescriptor, ...]:
        klass = type(self._extension)
        infos: dict[str, TabInfoDeclaration] = {}
        for declaration in getattr(klass, TAB_INFO_ATTR, ()):
            tab_name = self._cut("tab_info", "tab", declaration.tab)
            infos[tab_name] = declaration

        used: list[str] = []
        for provider in providers:
            if provider.tab and provider.tab not in used:
                used.append(provider.tab)
        for tab_name in infos:
            if tab_name not in used:
                self._warn(
                    "ANNOTATION_IGNORED",
                    provider="tab_info",
                    note=f"describes tab '{tab_name}' that has no providers",
                )
                used.append(tab_name)

        ordered: list[str] = []
        for tab_name in getattr(klass, TAB_ORDER_ATTR, ()):
            tab_name = truncate(tab_name)[0]
            if tab_name not in used:
                self._warn(
                    "ANNOTATION_IGNORED",
                    provider="tab_order",
                    note=f"lists tab '{tab_name}' that has no providers",
                )
            elif tab_name not in ordered:
                ordered.append(tab_name)
        ordered.extend(tab_name for tab_name in used if tab_name not in ordered)

        tabs = []
        for priority, tab_name in enumerate(ordered):
            info = infos.get(tab_name)
            if info is None:
                tabs.append(TabDescriptor(name=tab_name, tab_priority=priority))
                continue
            tabs.append(
                TabDescriptor(
                    name=tab_name,
                    icon=Icon(
                        name=self._cut("tab_info", "icon_name", info.icon_name),
                        family=info.icon_family,
                    ),
                    element_order=info.element_order,
                    tab_priority=priority,
                )
            )
        return tuple(tabs)

    def _invalidated_methods(self) -> tuple[str, ...]:
        names = getattr(type(self._extension), INVALIDATE_ATTR, ())
        return tuple(dict.fromkeys(truncate(name)[0] for name in names))

    # Helpers

    def _cut(
        self,
        provider: str,
        field_name: str,
        value: str,
        limit: int = MAX_IDENTIFIER_LENGTH,
    ) -> str:
        truncated, changed = truncate(value, limit)
        if changed:
            self._truncated(provider, field_name, value, truncated, limit)
        return truncated

    def _truncated(
        self, provider: str, field_name: str, original: str, truncated: str, limit: int
    ) -> None:
        self._warn(
            "VALUE_TRUNCATED",
            provider=provider,
            field=field_name,
            limit=limit,
            truncated=truncated,
            original=original,
        )

    def _warn(self, code: str, **context: Any) -> None:
        issue = self._errors.create(code, extension=self._name_for_errors, **context)
        self.issues.append(issue)

    def _error(self, code: str, **context: Any) -> ExtensionError:
        return self._errors.create(code, extension=self._name_for_errors, **context)


def _parameter_role(name: str, annotation: Any) -> ParameterRole | None:
    if annotation is inspect.Parameter.empty:
        if name in _UUID_NAMES:
            return ParameterRole.PLAYER_UUID
        if name in _PLAYER_NAME_NAMES:
            return ParameterRole.PLAYER_NAME
        if name in _GROUP_NAMES:
            return ParameterRole.GROUP
        return None

    if isinstance(annotation, str):
        annotation = annotation.rsplit(".", 1)[-1]
        return {
            "UUID": ParameterRole.PLAYER_UUID,
            "str": ParameterRole.PLAYER_NAME,
            "Group": ParameterRole.GROUP,
            "SimpleGroup": ParameterRole.GROUP,
        }.get(annotation)

    if annotation is uuid.UUID:
        return ParameterRole.PLAYER_UUID
    if annotation is str:
        return ParameterRole.PLAYER_NAME
    if annotation is Group or Group in getattr(annotation, "__mro__", ()):
        return ParameterRole.GROUP
    if isinstance(annotation, type) and issubclass(annotation, SimpleGroup):
        return ParameterRole.GROUP
    return None


def validate_annotations(
    extension: Any,
    dangling_condition: DanglingConditionPolicy = DanglingConditionPolicy.IGNORE_GATE,
) -> ExtensionDescriptor:
    """Check an extension for implementation mistakes, for use in unit tests.

    Args:
        extension: Extension instance
        dangling_condition: Policy for ``@conditional`` names nobody provides

    Returns:
        The extracted descriptor when there are no mistakes

    Raises:
        ExtensionError: On a hard failure or any warning
    """
    extractor = DataProviderExtractor(extension, dangling_condition)
    if extractor.issues:
        raise get_error_factory().create(
            "IMPLEMENTATION_MISTAKES",
            extension=extractor.plugin_name,
            detail="\n".join(extractor.warnings),
        )
    return extractor.descriptor
