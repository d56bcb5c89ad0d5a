"""Stored value model."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from plan_extensions.types import ValueKind


@dataclass(frozen=True)
class SubjectKey:
    """Identity of the subject a value is about.

    Attributes:
        kind: "player", "group" or "server"
        identifier: Player UUID, group name or server UUID
    """

    kind: str
    identifier: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.identifier}"


@dataclass(frozen=True)
class ExtensionValue:
    """Normalized value produced by a provider."""

    kind: ValueKind
    value: bool | int | float | str
    gathered_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def out_of_range(self) -> bool:
        """Percentage outside [0.0, 1.0]; stored as-is, flagged for presentation."""
        return self.kind == ValueKind.PERCENTAGE and not 0.0 <= float(self.value) <= 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "value": self.value,
            "gathered_at": self.gathered_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtensionValue":
        return cls(
            kind=ValueKind(data["kind"]),
            value=data["value"],
            gathered_at=datetime.fromisoformat(data["gathered_at"]),
        )
