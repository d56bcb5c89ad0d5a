"""Shared types for plan-extensions.

Import from here rather than submodules:
    from plan_extensions.types import LogLevel, ValueKind, SubjectShape
"""

from .enums import (
    Color,
    DanglingConditionPolicy,
    ElementOrder,
    Family,
    FormatType,
    LogFormat,
    LogLevel,
    ParameterRole,
    StorageType,
    SubjectShape,
    ValueKind,
)
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "StorageType",
    "ValueKind",
    "SubjectShape",
    "ParameterRole",
    "FormatType",
    "Family",
    "Color",
    "ElementOrder",
    "DanglingConditionPolicy",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
