"""Error matchers for converting provider exceptions to ExtensionErrors."""

import asyncio

from .errors import ErrorMatcher, MatchResult


class TimeoutErrorMatcher(ErrorMatcher):
    """Matches timeout errors."""

    def matches(self, error: BaseException) -> bool:
        return isinstance(error, (asyncio.TimeoutError, TimeoutError))

    def extract(self, error: BaseException) -> MatchResult:
        return MatchResult(
            code="PROVIDER_TIMEOUT",
            context={
                "timeout_seconds": getattr(error, "timeout_seconds", "unknown"),
                "error_type": type(error).__name__,
            },
        )


class MissingDependencyMatcher(ErrorMatcher):
    """Matches errors raised when the integrated plugin is absent or changed.

    A missing module, a removed function or a renamed attribute all surface
    as one of these at call time.
    """

    def matches(self, error: BaseException) -> bool:
        return isinstance(error, (ImportError, NameError, AttributeError))

    def extract(self, error: BaseException) -> MatchResult:
        return MatchResult(
            code="PROVIDER_DEPENDENCY_MISSING",
            context={"detail": str(error), "error_type": type(error).__name__},
        )


class GenericErrorMatcher(ErrorMatcher):
    """Fallback matcher for any exception."""

    def matches(self, error: BaseException) -> bool:
        return True

    def extract(self, error: BaseException) -> MatchResult:
        return MatchResult(
            code="PROVIDER_FAILED",
            context={"detail": str(error), "error_type": type(error).__name__},
        )


class ErrorMatcherChain:
    """Ordered chain of matchers. First match wins."""

    def __init__(self) -> None:
        """Initialize matcher chain with built-in matchers."""
        self.matchers: list[ErrorMatcher] = []
        self._load_builtin_matchers()

    def match(self, error: BaseException) -> MatchResult:
        """Find first matching matcher and extract result.

        Args:
            error: Exception to match

        Returns:
            MatchResult from first matching matcher
        """
        for matcher in self.matchers:
            if matcher.matches(error):
                return matcher.extract(error)

        # Should never reach here due to GenericErrorMatcher
        return MatchResult(
            code="INTERNAL_ERROR",
            context={"detail": str(error), "error_type": type(error).__name__},
        )

    def _load_builtin_matchers(self) -> None:
        """Load built-in matchers in priority order."""
        # Order matters - more specific matchers first
        self.matchers = [
            TimeoutErrorMatcher(),
            MissingDependencyMatcher(),
            GenericErrorMatcher(),  # Fallback - must be last
        ]
