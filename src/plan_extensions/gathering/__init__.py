"""Value gathering - running providers for a subject."""

from .conditions import ConditionResolver
from .gatherer import GatheringResult, ProviderValueGatherer
from .subjects import GroupSubject, PlayerSubject, ServerSubject, Subject
from .values import convert_value

__all__ = [
    "ProviderValueGatherer",
    "GatheringResult",
    "ConditionResolver",
    "PlayerSubject",
    "GroupSubject",
    "ServerSubject",
    "Subject",
    "convert_value",
]
