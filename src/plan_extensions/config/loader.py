"""Extension configuration loader."""

import os
import re
import typing
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from plan_extensions.errors import create_error
from plan_extensions.types import (
    DanglingConditionPolicy,
    LogLevel,
    StorageType,
    ValidationIssue,
    ValidationResult,
)

from .models import ExtensionsConfig

CONFIG_PATH_ENV = "PLAN_EXTENSIONS_CONFIG"
LOCAL_CONFIG_NAME = "plan-extensions.yaml"


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Args:
        value: String with potential env var references

    Returns:
        String with env vars resolved

    Raises:
        ExtensionError: If required var not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        elif operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        else:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Required environment variable {var_name} not set",
            )

    return re.sub(pattern, replacer, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    else:
        return data


class ConfigLoader:
    """Load and validate extension configuration."""

    def __init__(self, logger: Any = None):
        """Initialize config loader.

        Args:
            logger: Optional ExtensionLogger instance
        """
        self._config: ExtensionsConfig | None = None
        self._config_path: Path | None = None
        self._logger = logger

    @property
    def config_path(self) -> Path | None:
        """Path of the file the current config was loaded from."""
        return self._config_path

    def load(self, path: str | Path | None = None, use_defaults: bool = True) -> ExtensionsConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. PLAN_EXTENSIONS_CONFIG environment variable
        2. ./plan-extensions.yaml
        3. ~/.plan-extensions/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: If True, use default config when no file found

        Returns:
            Loaded ExtensionsConfig instance

        Raises:
            ExtensionError: If file not found (when use_defaults=False) or invalid
        """
        if path is None:
            path = self._resolve_config_path()

        config_path = Path(path)

        if not config_path.exists():
            if use_defaults:
                if self._logger:
                    self._logger._log(
                        LogLevel.INFO,
                        "config",
                        "No config file found, using default configuration",
                    )
                config = self.load_defaults()
                # Keep the path so new plugin sections can be written there later
                self._config_path = config_path
                return config
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e

        data = _resolve_env_vars_recursive(data)

        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> ExtensionsConfig:
        """Load default configuration without a file."""
        return self.load_from_dict({})

    def load_from_dict(
        self, data: dict[str, Any], config_path: Path | None = None
    ) -> ExtensionsConfig:
        """Load configuration from dictionary.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file (for tracking)

        Returns:
            Loaded ExtensionsConfig instance

        Raises:
            ExtensionError: If configuration is invalid
        """
        validation = self.validate(data)
        if not validation.valid:
            error_messages = [f"- {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        try:
            config = self._dict_to_config(data)
        except Exception as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config = config
        self._config_path = config_path

        if self._logger:
            self._logger._log(LogLevel.INFO, "config", "Configuration loaded successfully")

        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        valid_keys = {field.name for field in fields(ExtensionsConfig)}

        for key in data:
            if key not in valid_keys:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )

        plugins = data.get("plugins")
        if plugins is not None:
            if not isinstance(plugins, dict):
                errors.append(
                    ValidationIssue(path="plugins", message="plugins must be a dictionary")
                )
            else:
                for name, section in plugins.items():
                    if section is None:
                        continue
                    if not isinstance(section, dict):
                        errors.append(
                            ValidationIssue(
                                path=f"plugins.{name}",
                                message=f"plugins.{name} must be a dictionary",
                            )
                        )
                    elif "enabled" in section and not isinstance(section["enabled"], bool):
                        errors.append(
                            ValidationIssue(
                                path=f"plugins.{name}.enabled",
                                message=f"plugins.{name}.enabled must be a boolean",
                            )
                        )

        gathering = data.get("gathering")
        if isinstance(gathering, dict):
            if "provider_timeout" in gathering:
                value = gathering["provider_timeout"]
                if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                    errors.append(
                        ValidationIssue(
                            path="gathering.provider_timeout",
                            message="provider_timeout must be a non-negative number",
                        )
                    )
            if "dangling_condition" in gathering:
                allowed = {policy.value for policy in DanglingConditionPolicy}
                if gathering["dangling_condition"] not in allowed:
                    errors.append(
                        ValidationIssue(
                            path="gathering.dangling_condition",
                            message=f"dangling_condition must be one of {sorted(allowed)}",
                        )
                    )

        storage = data.get("storage")
        if isinstance(storage, dict) and "type" in storage:
            allowed = {storage_type.value for storage_type in StorageType}
            if storage["type"] not in allowed:
                errors.append(
                    ValidationIssue(
                        path="storage.type",
                        message=f"storage type must be one of {sorted(allowed)}",
                    )
                )

        return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)

    def get(self) -> ExtensionsConfig:
        """Get current configuration.

        Raises:
            ExtensionError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def _resolve_config_path(self) -> Path:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)

        local_path = Path(LOCAL_CONFIG_NAME)
        if local_path.exists():
            return local_path

        home_path = Path.home() / ".plan-extensions" / "config.yaml"
        if home_path.exists():
            return home_path

        # Not found - use local path as default
        return local_path

    def _dict_to_config(self, data: dict[str, Any]) -> ExtensionsConfig:
        kwargs: dict[str, Any] = {}

        for field in fields(ExtensionsConfig):
            if field.name in data:
                kwargs[field.name] = self._convert_field(field.type, data[field.name])

        return ExtensionsConfig(**kwargs)

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert field value to appropriate type.

        Args:
            field_type: Expected field type
            value: Value to convert

        Returns:
            Converted value
        """
        origin = typing.get_origin(field_type)

        # A bare "name:" section in YAML means all defaults
        if value is None:
            if hasattr(field_type, "__dataclass_fields__"):
                return field_type()
            return None

        if origin is list:
            if not isinstance(value, list):
                return value
            args = typing.get_args(field_type)
            if args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        if origin is dict:
            if not isinstance(value, dict):
                return value
            args = typing.get_args(field_type)
            if args and len(args) == 2:
                value_type = args[1]
                return {k: self._convert_field(value_type, v) for k, v in value.items()}
            return value

        if hasattr(field_type, "__dataclass_fields__"):
            if isinstance(value, dict):
                kwargs = {}
                for f in fields(field_type):
                    if f.name in value:
                        kwargs[f.name] = self._convert_field(f.type, value[f.name])
                return field_type(**kwargs)
            return value

        if hasattr(field_type, "__mro__") and any(
            base.__name__ == "Enum" for base in field_type.__mro__
        ):
            if isinstance(value, str):
                return field_type(value)
            return value

        return value


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton."""
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> ExtensionsConfig:
    """Convenience function to load config."""
    return get_config_loader().load(path)
