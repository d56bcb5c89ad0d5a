"""
Pytest configuration and shared fixtures for plan-extensions tests.
"""

import json
import sys
from collections.abc import Callable, Generator
from io import StringIO
from pathlib import Path
from typing import Any

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from plan_extensions.config import PluginsConfigSection  # noqa: E402
from plan_extensions.logging import ExtensionLogger, LogConfig  # noqa: E402
from plan_extensions.service import ExtensionService, reset_extension_service  # noqa: E402
from plan_extensions.storage import MemoryExtensionStore  # noqa: E402
from plan_extensions.types import LogFormat, LogLevel  # noqa: E402

# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> StringIO:
    """Capture log lines."""
    return StringIO()


@pytest.fixture
def ext_logger(log_output: StringIO) -> ExtensionLogger:
    """JSON logger at DEBUG level writing to log_output."""
    return ExtensionLogger(
        LogConfig(level=LogLevel.DEBUG, format=LogFormat.JSON, output=log_output)
    )


@pytest.fixture
def log_events(log_output: StringIO) -> Callable[..., list[dict[str, Any]]]:
    """Parse captured JSON log lines, optionally filtered by event name."""

    def _events(event: str | None = None) -> list[dict[str, Any]]:
        entries = [json.loads(line) for line in log_output.getvalue().splitlines() if line]
        if event is None:
            return entries
        return [entry for entry in entries if entry.get("event") == event]

    return _events


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def store() -> MemoryExtensionStore:
    """In-memory extension store."""
    return MemoryExtensionStore()


@pytest.fixture
def plugins_config() -> PluginsConfigSection:
    """Plugins section not backed by a file."""
    return PluginsConfigSection()


@pytest.fixture
def service(
    plugins_config: PluginsConfigSection,
    store: MemoryExtensionStore,
    ext_logger: ExtensionLogger,
) -> ExtensionService:
    """Extension service without built-in extensions."""
    return ExtensionService(
        plugins_config,
        store,
        logger=ext_logger,
        server_uuid="11111111-2222-3333-4444-555555555555",
        provider_timeout=2.0,
        builtin_extensions={},
    )


@pytest.fixture(autouse=True)
def reset_service_accessor() -> Generator[None, None, None]:
    """Reset the global extension service before and after each test."""
    reset_extension_service()
    yield
    reset_extension_service()


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "slow: Slow tests")
