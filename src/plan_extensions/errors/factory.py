"""Error factory for creating ExtensionErrors from any exception type."""

from typing import Any

from .errors import ExtensionError
from .matchers import ErrorMatcherChain
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates ExtensionErrors from any exception type."""

    def __init__(
        self,
        registry: ErrorRegistry | None = None,
        matcher_chain: ErrorMatcherChain | None = None,
    ):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
            matcher_chain: Matcher chain (defaults to new ErrorMatcherChain())
        """
        self.registry = registry or ErrorRegistry()
        self.matcher_chain = matcher_chain or ErrorMatcherChain()

    def from_exception(
        self,
        error: BaseException,
        extension: str | None = None,
        provider: str | None = None,
        subject: str | None = None,
    ) -> ExtensionError:
        """Convert any exception to ExtensionError.

        Args:
            error: Exception to convert
            extension: Optional extension name
            provider: Optional provider name
            subject: Optional subject description

        Returns:
            ExtensionError instance
        """
        # If already an ExtensionError, just add context
        if isinstance(error, ExtensionError):
            return error.with_context(extension=extension, provider=provider, subject=subject)

        match_result = self.matcher_chain.match(error)

        context = match_result.context.copy()
        if extension:
            context["extension"] = extension
        if provider:
            context["provider"] = provider
        if subject:
            context["subject"] = subject

        return self.registry.create(code=match_result.code, context=context)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> ExtensionError:
        """Create ExtensionError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            ExtensionError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> ExtensionError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        ExtensionError instance
    """
    return get_error_factory().create(code, context)
