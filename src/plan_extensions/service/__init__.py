"""Extension service - registration of data extensions and gathering."""

from .service import (
    ExtensionService,
    get_extension_service,
    reset_extension_service,
    set_extension_service,
)

__all__ = [
    "ExtensionService",
    "get_extension_service",
    "set_extension_service",
    "reset_extension_service",
]
