"""Extension logger - colored or JSON logging for registration and gathering."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TextIO

from plan_extensions.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from plan_extensions.types import LogFormat, LogLevel

if TYPE_CHECKING:
    from plan_extensions.errors import ExtensionError


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stdout)

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {
                "service": True,
                "extension": True,
                "gatherer": True,
                "storage": True,
                "config": True,
            }


class ExtensionLogger:
    """Main logger facade. Creates extension-scoped loggers."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()
        self._level_order = {
            LogLevel.DEBUG: 0,
            LogLevel.INFO: 1,
            LogLevel.WARN: 2,
            LogLevel.ERROR: 3,
        }

    def extension(self, plugin_name: str) -> "ExtensionScopeLogger":
        """Get a logger scoped to one extension.

        Args:
            plugin_name: Name of the extension

        Returns:
            ExtensionScopeLogger instance
        """
        return ExtensionScopeLogger(self, plugin_name)

    def configure(self, config: LogConfig) -> None:
        """Update configuration (for hot-reload).

        Args:
            config: New logger configuration
        """
        self.config = config

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (service, extension, gatherer, storage, config)
            message: Log message
            context: Additional context data
        """
        level = LogLevel(level)
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "service": MAGENTA,
            "extension": CYAN,
            "gatherer": GREEN,
            "storage": ORANGE,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_context:
            context_str = str(context)
            if len(context_str) > self.config.truncate_at:
                context_str = context_str[: self.config.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{context_str}{RESET}"

        print(output, file=self.config.output)


class ExtensionScopeLogger:
    """Logger for events of a single extension."""

    def __init__(self, parent: ExtensionLogger, plugin_name: str):
        """Initialize extension logger.

        Args:
            parent: Parent ExtensionLogger instance
            plugin_name: Extension name every event is tagged with
        """
        self.parent = parent
        self.plugin_name = plugin_name

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        context: dict[str, Any] = {"extension": self.plugin_name, "event": event}
        context.update({k: v for k, v in extra.items() if v is not None})
        return context

    def registered(self, provider_count: int) -> None:
        """Log successful registration."""
        self.parent._log(
            LogLevel.INFO,
            "service",
            f"{self.plugin_name} extension registered ({provider_count} providers) ✓",
            self._context("extension_registered", provider_count=provider_count),
        )

    def disabled(self) -> None:
        """Log that the config gate turned the extension away."""
        self.parent._log(
            LogLevel.DEBUG,
            "service",
            f"{self.plugin_name} extension disabled in the config.",
            self._context("extension_disabled"),
        )

    def section_created(self) -> None:
        """Log that a default config section was written for the extension."""
        self.parent._log(
            LogLevel.DEBUG,
            "config",
            f"Created config section plugins.{self.plugin_name} (enabled)",
            self._context("config_section_created"),
        )

    def config_failed(self, error: Exception) -> None:
        """Log a config I/O failure that aborted registration."""
        self.parent._log(
            LogLevel.WARN,
            "config",
            f"Could not register DataExtension for {self.plugin_name} due to {error!r}",
            self._context(
                "config_failed", error=str(error), error_type=type(error).__name__
            ),
        )

    def rejected(self, error: "ExtensionError") -> None:
        """Log a hard validation failure."""
        self.parent._log(
            LogLevel.WARN,
            "extension",
            f"DataExtension {self.plugin_name} was rejected: {error}",
            self._context("extension_rejected", code=error.code, error=str(error)),
        )

    def duplicate(self) -> None:
        """Log a second registration under an existing name."""
        self.parent._log(
            LogLevel.WARN,
            "service",
            f"{self.plugin_name} extension is already registered, ignoring the new instance",
            self._context("extension_duplicate"),
        )

    def implementation_mistake(self, warning: str) -> None:
        """Log a soft validation warning."""
        self.parent._log(
            LogLevel.WARN,
            "extension",
            f"DataExtension API implementation mistake for {self.plugin_name}: {warning}",
            self._context("implementation_mistake", warning=warning),
        )

    def metadata_stored(self) -> None:
        self.parent._log(
            LogLevel.DEBUG,
            "storage",
            f"Stored extension information of {self.plugin_name}",
            self._context("metadata_stored"),
        )

    def metadata_failed(self, error: Exception) -> None:
        self.parent._log(
            LogLevel.WARN,
            "storage",
            f"Failed to store extension information of {self.plugin_name}: {error}",
            self._context(
                "metadata_failed", error=str(error), error_type=type(error).__name__
            ),
        )

    def provider_skipped(self, provider: str, subject: str, condition: str) -> None:
        self.parent._log(
            LogLevel.DEBUG,
            "gatherer",
            f"{self.plugin_name}.{provider} skipped for {subject}: condition '{condition}' not met",
            self._context(
                "provider_skipped", provider=provider, subject=subject, condition=condition
            ),
        )

    def provider_failed(self, provider: str, subject: str, error: "ExtensionError") -> None:
        """Log a provider failure isolated inside a gathering pass.

        Args:
            provider: Provider method name
            subject: Subject the pass ran for
            error: Classified failure
        """
        self.parent._log(
            LogLevel.WARN,
            "gatherer",
            (
                f"{self.plugin_name} ran into (but failed safely) {error.error_type or error.code} "
                f"when updating value '{provider}' for '{subject}': {error}"
            ),
            self._context(
                "provider_failed",
                provider=provider,
                subject=subject,
                code=error.code,
                error=str(error),
                error_type=error.error_type,
            ),
        )

    def store_failed(self, provider: str, subject: str, error: Exception) -> None:
        self.parent._log(
            LogLevel.WARN,
            "storage",
            f"Failed to store {self.plugin_name}.{provider} for '{subject}': {error}",
            self._context(
                "store_failed",
                provider=provider,
                subject=subject,
                error=str(error),
                error_type=type(error).__name__,
            ),
        )

    def pass_completed(
        self, subject: str, stored: int, skipped: int, failed: int, duration_ms: int
    ) -> None:
        self.parent._log(
            LogLevel.DEBUG,
            "gatherer",
            (
                f"{self.plugin_name} pass for '{subject}' completed "
                f"({stored} stored, {skipped} skipped, {failed} failed, {duration_ms}ms)"
            ),
            self._context(
                "pass_completed",
                subject=subject,
                stored=stored,
                skipped=skipped,
                failed=failed,
                duration_ms=duration_ms,
            ),
        )

    def pass_crashed(self, subject: str, error: BaseException) -> None:
        """Log a failure that escaped a whole gathering pass."""
        self.parent._log(
            LogLevel.WARN,
            "service",
            (
                f"{self.plugin_name} ran into (but failed safely) {type(error).__name__} "
                f"when updating values for '{subject}', (You can disable integration with "
                f"setting 'plugins.{self.plugin_name}.enabled') reason: '{error}'"
            ),
            self._context(
                "pass_crashed",
                subject=subject,
                error=str(error),
                error_type=type(error).__name__,
            ),
        )
