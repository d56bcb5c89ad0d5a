"""Public API for writing data extensions.

Usage:
    from plan_extensions.extension import (
        DataExtension,
        boolean_provider,
        conditional,
        plugin_info,
        string_provider,
    )
"""

from .annotations import (
    PluginInfo,
    ProviderDeclaration,
    TabInfoDeclaration,
    boolean_provider,
    conditional,
    double_provider,
    invalidate_method,
    number_provider,
    percentage_provider,
    plugin_info,
    string_provider,
    tab,
    tab_info,
    tab_order,
)
from .api import DataExtension, Group, SimpleGroup

__all__ = [
    # Base types
    "DataExtension",
    "Group",
    "SimpleGroup",
    # Class decorators
    "plugin_info",
    "tab_info",
    "tab_order",
    "invalidate_method",
    # Method decorators
    "boolean_provider",
    "number_provider",
    "double_provider",
    "percentage_provider",
    "string_provider",
    "conditional",
    "tab",
    # Declarations
    "PluginInfo",
    "ProviderDeclaration",
    "TabInfoDeclaration",
]
