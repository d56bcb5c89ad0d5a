"""Subjects a gathering pass runs for."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from plan_extensions.extension.api import Group
from plan_extensions.extractor.metadata import ProviderDescriptor
from plan_extensions.storage.types import SubjectKey
from plan_extensions.types import ParameterRole, SubjectShape


@dataclass(frozen=True)
class PlayerSubject:
    """A player, known by UUID and name."""

    uuid: UUID
    name: str

    @property
    def shape(self) -> SubjectShape:
        return SubjectShape.PLAYER

    @property
    def key(self) -> SubjectKey:
        return SubjectKey(kind=SubjectShape.PLAYER.value, identifier=str(self.uuid))

    def arguments_for(self, descriptor: ProviderDescriptor) -> list[Any]:
        values = {ParameterRole.PLAYER_UUID: self.uuid, ParameterRole.PLAYER_NAME: self.name}
        return [values[role] for role in _check_shape(self, descriptor)]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class GroupSubject:
    """A group of players, supplied by the caller."""

    group: Group

    @property
    def shape(self) -> SubjectShape:
        return SubjectShape.GROUP

    @property
    def key(self) -> SubjectKey:
        return SubjectKey(kind=SubjectShape.GROUP.value, identifier=self.group.name)

    def arguments_for(self, descriptor: ProviderDescriptor) -> list[Any]:
        return [self.group for _ in _check_shape(self, descriptor)]

    def __str__(self) -> str:
        return self.group.name


@dataclass(frozen=True)
class ServerSubject:
    """The server itself."""

    server_uuid: str

    @property
    def shape(self) -> SubjectShape:
        return SubjectShape.SERVER

    @property
    def key(self) -> SubjectKey:
        return SubjectKey(kind=SubjectShape.SERVER.value, identifier=self.server_uuid)

    def arguments_for(self, descriptor: ProviderDescriptor) -> list[Any]:
        _check_shape(self, descriptor)
        return []

    def __str__(self) -> str:
        return f"server {self.server_uuid}"


Subject = PlayerSubject | GroupSubject | ServerSubject


def _check_shape(subject: Subject, descriptor: ProviderDescriptor) -> tuple[ParameterRole, ...]:
    if descriptor.subject_shape != subject.shape:
        raise ValueError(
            f"{descriptor.method_name} is a {descriptor.subject_shape.value} provider, "
            f"can not be called for a {subject.shape.value}"
        )
    return descriptor.parameters
