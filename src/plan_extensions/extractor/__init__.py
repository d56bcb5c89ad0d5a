"""Provider discovery and validation."""

from .extractor import DataProviderExtractor, validate_annotations
from .metadata import (
    MAX_DESCRIPTION_LENGTH,
    MAX_IDENTIFIER_LENGTH,
    ExtensionDescriptor,
    Icon,
    ProviderDescriptor,
    TabDescriptor,
    truncate,
)
from .ordering import order_providers

__all__ = [
    # Extractor
    "DataProviderExtractor",
    "validate_annotations",
    "order_providers",
    # Metadata
    "ExtensionDescriptor",
    "ProviderDescriptor",
    "TabDescriptor",
    "Icon",
    "truncate",
    "MAX_IDENTIFIER_LENGTH",
    "MAX_DESCRIPTION_LENGTH",
]
