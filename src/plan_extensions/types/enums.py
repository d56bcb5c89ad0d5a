"""Shared enumerations for plan-extensions."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class StorageType(str, Enum):
    """Backing store for gathered values."""

    MEMORY = "memory"
    SQLITE = "sqlite"


class ValueKind(str, Enum):
    """Kind of value a provider produces."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    DOUBLE = "double"
    PERCENTAGE = "percentage"
    STRING = "string"


class SubjectShape(str, Enum):
    """What a provider's value is about, derived from its parameters."""

    PLAYER = "player"
    GROUP = "group"
    SERVER = "server"


class ParameterRole(str, Enum):
    """Role of a single provider parameter."""

    PLAYER_UUID = "player_uuid"
    PLAYER_NAME = "player_name"
    GROUP = "group"


class FormatType(str, Enum):
    """Formatting hint for number providers."""

    DATE_YEAR = "date_year"
    DATE_SECOND = "date_second"
    TIME_MILLISECONDS = "time_milliseconds"
    NONE = "none"


class Family(str, Enum):
    """Icon family."""

    SOLID = "solid"
    REGULAR = "regular"
    BRAND = "brand"


class Color(str, Enum):
    """Display color for icons and plugins."""

    RED = "red"
    PINK = "pink"
    PURPLE = "purple"
    DEEP_PURPLE = "deep_purple"
    INDIGO = "indigo"
    BLUE = "blue"
    LIGHT_BLUE = "light_blue"
    CYAN = "cyan"
    TEAL = "teal"
    GREEN = "green"
    LIGHT_GREEN = "light_green"
    LIME = "lime"
    YELLOW = "yellow"
    AMBER = "amber"
    ORANGE = "orange"
    DEEP_ORANGE = "deep_orange"
    BROWN = "brown"
    GREY = "grey"
    BLUE_GREY = "blue_grey"
    BLACK = "black"
    NONE = "none"


class ElementOrder(str, Enum):
    """Order of element types inside a tab."""

    VALUES = "values"
    TABLE = "table"
    GRAPH = "graph"


class DanglingConditionPolicy(str, Enum):
    """What to do with a provider gated on a condition nobody publishes."""

    IGNORE_GATE = "ignore_gate"  # provider always runs
    EXCLUDE = "exclude"  # provider is dropped at extraction
