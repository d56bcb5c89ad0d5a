"""Built-in data extensions.

This module exports the built-in extensions and the BUILTIN_EXTENSIONS registry.
"""

from .host import HostExtension

# Factories of built-in extensions by name, registered by ExtensionService.enable()
BUILTIN_EXTENSIONS: dict[str, type] = {
    "host": HostExtension,
}

__all__ = ["HostExtension", "BUILTIN_EXTENSIONS"]
