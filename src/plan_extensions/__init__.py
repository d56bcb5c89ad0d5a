"""Plan Extensions - data extension registry and value gathering.

Extensions declare typed value providers with decorators; the service
validates them, stores their metadata and gathers their values for
players, groups and the server.
"""

from plan_extensions.application import ExtensionApplication
from plan_extensions.service import ExtensionService

__version__ = "0.1.0"
__all__ = ["__version__", "ExtensionApplication", "ExtensionService"]
