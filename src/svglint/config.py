"""Configuration management for svglint using Pydantic models."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILE_NAME = ".svglint.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True, frozen=True)


class SvgLintConfig(BaseModel):
    """Complete svglint configuration model.

    ``rules`` maps a rule name (``attr``, ``elm``, ``identity``, ``custom``)
    to its configuration, or to a list of configurations to run the rule
    several times. Rule configurations are validated by the rules themselves
    so that a broken rule only affects its own diagnostics.
    """
    rules: dict[str, Any] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("rules")
    @classmethod
    def validate_rule_names(cls, v):
        for name in v:
            if not name.strip():
                raise ValueError("rule names must not be empty")
        return v

    model_config = ConfigDict(extra="forbid", frozen=True)


def coerce_config(config: "SvgLintConfig | dict | None") -> SvgLintConfig:
    """Accept a config model, a plain dictionary or None.

    Raises:
        ValueError: If a dictionary does not describe a valid configuration
    """
    if config is None:
        return create_default_config()
    if isinstance(config, SvgLintConfig):
        return config
    return SvgLintConfig.model_validate(config)


def load_config(config_path: str | Path | None = None) -> SvgLintConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .svglint.json

    Returns:
        SvgLintConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return SvgLintConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .svglint.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> SvgLintConfig:
    """Create the zero-config default: no rules, info logging."""
    return SvgLintConfig()
