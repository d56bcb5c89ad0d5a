"""Conversion of raw provider results into stored values."""

import numbers
from typing import Any

from plan_extensions.errors import create_error
from plan_extensions.extractor.metadata import (
    MAX_IDENTIFIER_LENGTH,
    ProviderDescriptor,
    truncate,
)
from plan_extensions.storage.types import ExtensionValue
from plan_extensions.types import ValueKind

_EXPECTED = {
    ValueKind.BOOLEAN: "bool",
    ValueKind.NUMBER: "int",
    ValueKind.DOUBLE: "float",
    ValueKind.PERCENTAGE: "float",
    ValueKind.STRING: "str",
}


def convert_value(descriptor: ProviderDescriptor, raw: Any) -> ExtensionValue:
    """Normalize a provider result to the provider's value kind.

    Percentages are not clamped; strings are cut to 50 characters.

    Args:
        descriptor: Provider that produced the value
        raw: Returned value

    Returns:
        ExtensionValue ready for storage

    Raises:
        ExtensionError: PROVIDER_INVALID_VALUE for None or a wrong type
    """
    kind = descriptor.value_kind

    if kind == ValueKind.BOOLEAN and isinstance(raw, bool):
        return ExtensionValue(kind=kind, value=raw)

    if not isinstance(raw, bool):
        if kind == ValueKind.NUMBER and isinstance(raw, numbers.Integral):
            return ExtensionValue(kind=kind, value=int(raw))
        if kind in (ValueKind.DOUBLE, ValueKind.PERCENTAGE) and isinstance(raw, numbers.Real):
            return ExtensionValue(kind=kind, value=float(raw))
        if kind == ValueKind.STRING and isinstance(raw, str):
            value, _ = truncate(raw, MAX_IDENTIFIER_LENGTH)
            return ExtensionValue(kind=kind, value=value)

    raise create_error(
        "PROVIDER_INVALID_VALUE",
        provider=descriptor.method_name,
        value_type=type(raw).__name__,
        expected=_EXPECTED[kind],
    )
