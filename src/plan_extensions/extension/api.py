"""Base types extension authors implement against."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class DataExtension:
    """Base class for data extensions.

    The class must be decorated with ``@plugin_info``; extensions given to
    the service without it are rejected.

    Public methods decorated with a provider decorator expose values:

    - ``@boolean_provider`` for ``bool`` values, and conditions for ``@conditional``
    - ``@number_provider`` for ``int`` values, with optional formatting
    - ``@double_provider`` for ``float`` values
    - ``@percentage_provider`` for ``float`` values between 0.0 and 1.0
    - ``@string_provider`` for ``str`` values

    The parameters of a provider method tell what the value is about:

    - ``player_uuid: UUID`` and/or ``player_name: str`` - a player
    - ``group: Group`` - a group given by the caller
    - nothing - the server

    The method name is the identifier of the value in storage. Only the
    first 50 characters are used. When renaming a method, list the old name
    with ``@invalidate_method`` so its stored values are removed.

    Use ``validate_annotations`` in unit tests to catch implementation
    mistakes early.
    """


@runtime_checkable
class Group(Protocol):
    """Subject of group providers. Anything with a ``name`` works."""

    name: str


@dataclass(frozen=True)
class SimpleGroup:
    """Plain named group."""

    name: str
