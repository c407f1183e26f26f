# src/svcwatch/config.py
"""Configuration loading and validation using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from . import paths
from .errors import ConfigurationError


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: str = "INFO"
    json_format: bool = Field(False, alias="json")


class WatchdogConfig(BaseModel):
    """
    Root configuration model.

    Immutable once loaded; every operation receives it explicitly.
    Relative state/log paths are resolved against install_dir.
    """
    model_config = ConfigDict(frozen=True)

    service_name: str = "svcwatch-target"
    install_dir: Path = Field(default_factory=paths.get_default_install_dir)
    state_file: Path = Path("state.json")
    log_file: Path = Path("watchdog.log")
    task_name: str = "svcwatch"
    interval_minutes: int = Field(5, gt=0)
    boot_window_minutes: int = Field(10, gt=0)
    backend: Literal["auto", "windows", "systemd"] = "auto"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="before")
    @classmethod
    def _resolve_paths(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        install_dir = paths.expand_path(data.get("install_dir") or paths.get_default_install_dir())
        data["install_dir"] = install_dir
        for key, default in (("state_file", "state.json"), ("log_file", "watchdog.log")):
            value = paths.expand_path(data.get(key) or default)
            data[key] = value if value.is_absolute() else install_dir / value
        return data


def load_config(path: Optional[Path] = None) -> WatchdogConfig:
    """
    Load, parse, and validate the watchdog configuration file.

    Args:
        path: The path to the configuration file. If None, uses the default
            path, and a missing default file yields the built-in defaults.

    Returns:
        A validated WatchdogConfig instance.

    Raises:
        ConfigurationError: If an explicit file is not found, or any file
            cannot be read, parsed or validated.
    """
    config_path = Path(path) if path else paths.get_default_config_path()
    if not config_path.is_file():
        if path is not None:
            raise ConfigurationError(f"Configuration file not found at '{config_path}'.")
        return WatchdogConfig.model_validate({})

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
        return WatchdogConfig.model_validate(data)
    except (IOError, PermissionError) as e:
        raise ConfigurationError(f"Failed to read configuration file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse configuration file '{config_path}': {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed:\n{e}") from e
