"""Configuration loader for pastewatch."""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings


def load_config(config_path: Path) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate the configuration file and environment variables.

    The file may be YAML or JSON (JSON documents parse as YAML).

    Args:
        config_path: Path to the configuration document

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If the file is missing, unreadable, unparseable
            or fails validation, or if the environment is incomplete
    """
    app_config = load_app_config(config_path)

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to load environment configuration: {e}")

    return app_config, env_config


def load_app_config(config_path: Path) -> AppConfig:
    """Load and validate only the configuration document."""
    config_dict = _read_document(Path(config_path))

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=[_describe_error(error) for error in e.errors()],
            suggestions=[
                "Review config.example.yaml for the expected format",
                "Each keywords entry needs a non-empty 'keyword'",
            ],
        )


def _read_document(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            suggestions=[
                "Copy config.example.yaml and pass its path with --config",
            ],
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse configuration file: {e}",
            suggestions=["Check YAML/JSON syntax in your config file"],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_path} is readable"],
        )

    if not config_dict:
        raise ConfigurationError("Configuration file is empty")
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(config_dict).__name__}"
        )
    return config_dict


def _describe_error(error: Dict[str, Any]) -> str:
    field_path = " -> ".join(str(loc) for loc in error["loc"]) or "<root>"
    if error["type"] == "missing":
        return f"Missing required field: {field_path}"
    return f"{field_path}: {error['msg']}"


def validate_config_file(config_path: Path) -> bool:
    """
    Validate a configuration document without touching the environment.

    Returns:
        True if valid, False otherwise (the reason is printed)
    """
    try:
        load_app_config(config_path)
    except ConfigurationError as e:
        print(f"Configuration validation failed:\n{e}")
        return False
    print(f"Configuration file {config_path} is valid")
    return True
