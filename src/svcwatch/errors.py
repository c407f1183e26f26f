# src/svcwatch/errors.py
"""Typed exceptions and exit codes for the application."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Enumeration for application exit codes."""
    OK = 0
    FAILURE = 1


class WatchdogError(Exception):
    """Base exception for all svcwatch errors."""
    def __init__(self, message: str, exit_code: ExitCode = ExitCode.FAILURE):
        super().__init__(message)
        self.exit_code = exit_code

    def __str__(self) -> str:
        return f"[{type(self).__name__}] {super().__str__()}"


class ConfigurationError(WatchdogError):
    """Missing threshold, bad config file, or registration preconditions not met."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.FAILURE)


class PrivilegeError(WatchdogError):
    """The process is not running with administrative rights."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.FAILURE)


class ServiceNotInstalledError(WatchdogError):
    """The supervised service is unknown to the service manager."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.FAILURE)


class StateFileError(WatchdogError):
    """The state file exists but cannot be read or parsed."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.FAILURE)


class BackendError(WatchdogError):
    """An operating system command failed or returned unusable output."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.FAILURE)
