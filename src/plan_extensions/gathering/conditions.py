"""Per-pass condition bookkeeping."""


class ConditionResolver:
    """Remembers conditions published during one gathering pass.

    A condition nobody recorded is not satisfied.
    """

    def __init__(self) -> None:
        self._conditions: dict[str, bool] = {}

    def record(self, name: str, value: bool) -> None:
        """Record the outcome of a condition-providing provider."""
        self._conditions[name] = bool(value)

    def is_satisfied(self, requires_condition: str | None) -> bool:
        """Check whether a provider gated on ``requires_condition`` may run.

        Args:
            requires_condition: Condition name, or None for ungated providers

        Returns:
            True if ungated or the condition was recorded as true
        """
        if requires_condition is None:
            return True
        return self._conditions.get(requires_condition, False)

    def as_dict(self) -> dict[str, bool]:
        return dict(self._conditions)
