"""Configuration management for pastewatch."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError, PatternCompileError
from .loader import load_app_config, load_config, validate_config_file
from .models import (
    AppConfig,
    EmailConfig,
    KeywordRule,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ScraperConfig,
)

__all__ = [
    "load_config",
    "load_app_config",
    "validate_config_file",
    "load_environment_config",
    "AppConfig",
    "KeywordRule",
    "ScraperConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
    "PatternCompileError",
]
