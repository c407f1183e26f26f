# src/svcwatch/privileges.py
"""Administrative-rights detection."""

import ctypes
import os

from . import paths
from .errors import PrivilegeError


def is_elevated() -> bool:
    """Return True if the process runs as Administrator (Windows) or root (POSIX)."""
    if paths.is_windows():
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return os.geteuid() == 0


def require_elevated() -> None:
    """Raise PrivilegeError unless the process has administrative rights."""
    if not is_elevated():
        hint = "an elevated (Run as Administrator) shell" if paths.is_windows() else "root"
        raise PrivilegeError(f"svcwatch must be run from {hint}.")
