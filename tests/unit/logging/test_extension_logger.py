"""Tests for the extension logger."""

import json
from io import StringIO

from plan_extensions.errors import create_error
from plan_extensions.logging import ExtensionLogger, LogConfig
from plan_extensions.types import LogFormat, LogLevel


def _json_logger(output: StringIO, level: LogLevel = LogLevel.DEBUG) -> ExtensionLogger:
    return ExtensionLogger(LogConfig(level=level, format=LogFormat.JSON, output=output))


def _entries(output: StringIO) -> list[dict]:
    return [json.loads(line) for line in output.getvalue().splitlines()]


class TestExtensionLogger:
    """Tests for ExtensionLogger."""

    def test_json_entry(self):
        output = StringIO()
        _json_logger(output)._log(LogLevel.INFO, "service", "hello", {"extension": "Ext"})

        [entry] = _entries(output)
        assert entry["level"] == "INFO"
        assert entry["component"] == "service"
        assert entry["message"] == "hello"
        assert entry["extension"] == "Ext"
        assert entry["timestamp"].endswith("Z")

    def test_level_filter(self):
        output = StringIO()
        logger = _json_logger(output, level=LogLevel.WARN)
        logger._log(LogLevel.INFO, "service", "hidden")
        logger._log(LogLevel.WARN, "service", "shown")

        assert [e["message"] for e in _entries(output)] == ["shown"]

    def test_level_given_as_string(self):
        output = StringIO()
        _json_logger(output)._log("WARN", "service", "shown")
        assert _entries(output)[0]["level"] == "WARN"

    def test_component_switch(self):
        output = StringIO()
        logger = ExtensionLogger(
            LogConfig(
                format=LogFormat.JSON,
                components={"gatherer": False, "service": True},
                output=output,
            )
        )
        logger._log(LogLevel.WARN, "gatherer", "hidden")
        logger._log(LogLevel.WARN, "service", "shown")

        assert [e["message"] for e in _entries(output)] == ["shown"]

    def test_colored_format(self):
        output = StringIO()
        logger = ExtensionLogger(LogConfig(output=output))
        logger._log(LogLevel.INFO, "service", "registered", {"extension": "Ext"})

        line = output.getvalue()
        assert "[SERVICE]" in line
        assert "registered" in line
        assert "'extension': 'Ext'" in line

    def test_colored_context_truncated(self):
        output = StringIO()
        logger = ExtensionLogger(LogConfig(truncate_at=10, output=output))
        logger._log(LogLevel.INFO, "service", "msg", {"long": "x" * 100})
        assert "x" * 50 not in output.getvalue()
        assert "..." in output.getvalue()

    def test_configure(self):
        output = StringIO()
        logger = ExtensionLogger()
        logger.configure(LogConfig(format=LogFormat.JSON, output=output))
        logger._log(LogLevel.INFO, "service", "after")
        assert _entries(output)[0]["message"] == "after"


class TestExtensionScopeLogger:
    """Tests for extension-scoped events."""

    def test_events_carry_extension_and_event(self):
        output = StringIO()
        scope = _json_logger(output).extension("LiteBans")
        scope.registered(3)
        scope.disabled()
        scope.duplicate()

        entries = _entries(output)
        assert [e["event"] for e in entries] == [
            "extension_registered",
            "extension_disabled",
            "extension_duplicate",
        ]
        assert all(e["extension"] == "LiteBans" for e in entries)
        assert entries[0]["provider_count"] == 3

    def test_provider_failed(self):
        output = StringIO()
        error = create_error(
            "PROVIDER_FAILED", error_type="KeyError", detail="'uuid'", provider="ban_reason"
        )
        _json_logger(output).extension("LiteBans").provider_failed("ban_reason", "Notch", error)

        [entry] = _entries(output)
        assert entry["level"] == "WARN"
        assert entry["event"] == "provider_failed"
        assert entry["provider"] == "ban_reason"
        assert entry["subject"] == "Notch"
        assert entry["code"] == "PROVIDER_FAILED"
        assert entry["error_type"] == "KeyError"
        assert "LiteBans" in entry["message"]
        assert "ban_reason" in entry["message"]

    def test_pass_crashed_names_config_key(self):
        output = StringIO()
        _json_logger(output).extension("LiteBans").pass_crashed("Notch", RuntimeError("boom"))

        [entry] = _entries(output)
        assert "plugins.LiteBans.enabled" in entry["message"]
        assert entry["error_type"] == "RuntimeError"

    def test_implementation_mistake(self):
        output = StringIO()
        _json_logger(output).extension("LiteBans").implementation_mistake("bad tab")

        [entry] = _entries(output)
        assert entry["message"] == "DataExtension API implementation mistake for LiteBans: bad tab"
        assert entry["warning"] == "bad tab"

    def test_rejected_includes_code(self):
        output = StringIO()
        error = create_error("NO_PROVIDERS", extension="Empty")
        _json_logger(output).extension("Empty").rejected(error)
        assert _entries(output)[0]["code"] == "NO_PROVIDERS"

    def test_config_failed(self):
        output = StringIO()
        _json_logger(output).extension("LiteBans").config_failed(PermissionError("denied"))

        [entry] = _entries(output)
        assert entry["event"] == "config_failed"
        assert entry["error_type"] == "PermissionError"
