"""Extension logging - colored or JSON structured logging."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    ExtensionLogger,
    ExtensionScopeLogger,
    LogConfig,
)

__all__ = [
    # Logger classes
    "ExtensionLogger",
    "ExtensionScopeLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
