# src/svcwatch/shell.py
"""Subprocess execution wrappers for the OS service manager and scheduler."""

import subprocess
from typing import List, Optional

from .errors import BackendError

POWERSHELL = ["powershell", "-NoProfile", "-NonInteractive", "-Command"]


def run_command(
    args: List[str],
    check: bool = True,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Runs an OS command and captures its output.

    Args:
        args: The full command line.
        check: If True, raises BackendError on a non-zero exit code.
        input: Optional text passed on stdin.

    Returns:
        The CompletedProcess object.

    Raises:
        BackendError: If the binary is missing or the command fails.
    """
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=check,
            input=input,
        )
    except FileNotFoundError:
        raise BackendError(f"The '{args[0]}' command was not found. Is it installed and in your PATH?")
    except subprocess.CalledProcessError as e:
        error_message = (e.stderr or "").strip() or (e.stdout or "").strip()
        raise BackendError(f"Command '{' '.join(args)}' failed: {error_message}")


def run_powershell(script: str, check: bool = True) -> subprocess.CompletedProcess:
    """Runs a PowerShell script block non-interactively."""
    return run_command(POWERSHELL + [script], check=check)


def ps_quote(value: str) -> str:
    """Quote a value as a single-quoted PowerShell string literal."""
    return "'" + str(value).replace("'", "''") + "'"
