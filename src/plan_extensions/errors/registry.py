"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, ExtensionError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code."""
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def register(self, template: ErrorTemplate) -> None:
        """Add or replace a template."""
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: ExtensionError | None = None,
    ) -> ExtensionError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error

        Returns:
            ExtensionError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        # An explicit detail in the context wins over the template's
        detail = context.get("detail") or self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return ExtensionError(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            extension=context.get("extension"),
            provider=context.get("provider"),
            subject=context.get("subject"),
            error_type=context.get("error_type"),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # VALIDATION Errors
        self._templates["MISSING_PLUGIN_INFO"] = ErrorTemplate(
            code="MISSING_PLUGIN_INFO",
            category=ErrorCategory.VALIDATION,
            message_template="{extension} did not have @plugin_info class decorator",
            suggestion_template="Decorate the DataExtension class with @plugin_info(name=...)",
        )

        self._templates["NO_PROVIDERS"] = ErrorTemplate(
            code="NO_PROVIDERS",
            category=ErrorCategory.VALIDATION,
            message_template="{extension} has no valid public methods with provider decorators",
            suggestion_template="Decorate at least one public method with a provider decorator",
        )

        self._templates["DUPLICATE_IDENTIFIER"] = ErrorTemplate(
            code="DUPLICATE_IDENTIFIER",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} has the same identifier '{name}' as another provider",
            detail_template="Only the first 50 characters of a method name are used as its identifier",
            suggestion_template="Rename one of the methods so their first 50 characters differ",
        )

        self._templates["INVALID_PARAMETER_SHAPE"] = ErrorTemplate(
            code="INVALID_PARAMETER_SHAPE",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} has invalid parameters",
            suggestion_template=(
                "Accept (player_uuid: UUID), (player_name: str), both, "
                "(group: Group) or no parameters"
            ),
        )

        self._templates["INVALID_RETURN_TYPE"] = ErrorTemplate(
            code="INVALID_RETURN_TYPE",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} has an invalid return type",
        )

        self._templates["NOT_PUBLIC"] = ErrorTemplate(
            code="NOT_PUBLIC",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} is not publicly invokable",
            suggestion_template="Provider methods must be callable and not start with an underscore",
        )

        self._templates["SELF_CONDITION"] = ErrorTemplate(
            code="SELF_CONDITION",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} can not be conditional of its own condition '{condition}'",
        )

        self._templates["CONDITION_CYCLE"] = ErrorTemplate(
            code="CONDITION_CYCLE",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} is part of a condition cycle",
        )

        self._templates["DANGLING_CONDITION"] = ErrorTemplate(
            code="DANGLING_CONDITION",
            category=ErrorCategory.VALIDATION,
            message_template=(
                "{extension}.{provider} requires condition '{condition}' "
                "that no boolean provider provides"
            ),
        )

        self._templates["VALUE_TRUNCATED"] = ErrorTemplate(
            code="VALUE_TRUNCATED",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} '{field}' was over {limit} characters",
            detail_template="Value was truncated to '{truncated}'",
        )

        self._templates["ANNOTATION_IGNORED"] = ErrorTemplate(
            code="ANNOTATION_IGNORED",
            category=ErrorCategory.VALIDATION,
            message_template="{extension}.{provider} {note}",
        )

        self._templates["IMPLEMENTATION_MISTAKES"] = ErrorTemplate(
            code="IMPLEMENTATION_MISTAKES",
            category=ErrorCategory.VALIDATION,
            message_template="{extension} has implementation mistakes",
        )

        # PROVIDER Errors
        self._templates["PROVIDER_FAILED"] = ErrorTemplate(
            code="PROVIDER_FAILED",
            category=ErrorCategory.PROVIDER,
            message_template="Provider raised {error_type}",
            suggestion_template="Check the extension's logs for more details",
        )

        self._templates["PROVIDER_TIMEOUT"] = ErrorTemplate(
            code="PROVIDER_TIMEOUT",
            category=ErrorCategory.PROVIDER,
            message_template="Provider did not return within {timeout_seconds}s",
            suggestion_template="Increase gathering.provider_timeout or fix the stalled provider",
        )

        self._templates["PROVIDER_DEPENDENCY_MISSING"] = ErrorTemplate(
            code="PROVIDER_DEPENDENCY_MISSING",
            category=ErrorCategory.PROVIDER,
            message_template="Provider dependency is missing ({error_type})",
            suggestion_template="Check that the plugin the extension integrates with is installed",
        )

        self._templates["PROVIDER_INVALID_VALUE"] = ErrorTemplate(
            code="PROVIDER_INVALID_VALUE",
            category=ErrorCategory.PROVIDER,
            message_template="Provider returned {value_type}, expected {expected}",
        )

        # STORAGE Errors
        self._templates["STORE_WRITE_FAILED"] = ErrorTemplate(
            code="STORE_WRITE_FAILED",
            category=ErrorCategory.STORAGE,
            message_template="Failed to store value",
        )

        # CONFIG Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.CONFIG,
            message_template="Configuration is invalid",
            suggestion_template="Check the configuration file for errors",
        )

        # SYSTEM Errors
        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal error",
        )
