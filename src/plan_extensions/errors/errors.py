"""Extension error types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    VALIDATION = "VALIDATION"
    PROVIDER = "PROVIDER"
    STORAGE = "STORAGE"
    CONFIG = "CONFIG"
    SYSTEM = "SYSTEM"


@dataclass
class ExtensionError(Exception):
    """Structured error with context. Base exception for all extension errors."""

    # Identity
    code: str  # e.g., "NO_PROVIDERS"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    extension: str | None = None  # Plugin name or extension class name
    provider: str | None = None  # Provider method name
    subject: str | None = None  # Subject the failure happened for
    error_type: str | None = None  # Original exception class name

    # Error chain
    cause: "ExtensionError | None" = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "extension": self.extension,
            "provider": self.provider,
            "subject": self.subject,
            "error_type": self.error_type,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        extension: str | None = None,
        provider: str | None = None,
        subject: str | None = None,
    ) -> "ExtensionError":
        """Return copy with additional context.

        Args:
            extension: Optional extension name
            provider: Optional provider name
            subject: Optional subject description

        Returns:
            New ExtensionError instance with updated context
        """
        return ExtensionError(
            code=self.code,
            category=self.category,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
            extension=extension or self.extension,
            provider=provider or self.provider,
            subject=subject or self.subject,
            error_type=self.error_type,
            cause=self.cause,
            timestamp=self.timestamp,
        )


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Provider '{provider}' of {extension} failed"
    detail_template: str | None = None
    suggestion_template: str | None = None


@dataclass
class MatchResult:
    """Result of matching an exception."""

    code: str
    context: dict[str, Any]


class ErrorMatcher(ABC):
    """Base class for exception matchers."""

    @abstractmethod
    def matches(self, error: BaseException) -> bool:
        """Check if this matcher handles the error.

        Args:
            error: Exception to check

        Returns:
            True if this matcher can handle the error
        """

    @abstractmethod
    def extract(self, error: BaseException) -> MatchResult:
        """Extract error code and context from the exception.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with error code and context
        """
