# src/svcwatch/paths.py
"""Platform detection and default locations."""

import os
import sys
from pathlib import Path

import platformdirs

APP_NAME = "svcwatch"
CONFIG_ENV_VAR = "SVCWATCH_CONFIG"


def is_windows() -> bool:
    """Check if the current operating system is Windows."""
    return sys.platform == "win32"


def get_default_install_dir() -> Path:
    """
    Returns the machine-wide directory the watchdog is installed into.

    This is where the scheduled task runs from, e.g. C:\\ProgramData\\svcwatch
    on Windows or /usr/share/svcwatch on Linux.
    """
    return Path(platformdirs.site_data_dir(APP_NAME))


def get_default_config_path() -> Path:
    """Get the default path for the svcwatch.yaml configuration file."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_default_install_dir() / "svcwatch.yaml"


def expand_path(path: str | Path) -> Path:
    """Expand environment variables and user home directory in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path))))
