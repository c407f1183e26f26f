# src/svcwatch/backends/__init__.py
"""
Capability interfaces for the operating system collaborators.

The health-check and restart decision logic only ever talks to these three
interfaces, so it can run against fakes in tests. Concrete implementations
live in `windows.py` (Service Control Manager, Event Log, Task Scheduler) and
`systemd.py` (systemctl, journald, timers).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Optional

from pydantic import BaseModel

from .. import paths
from ..config import WatchdogConfig
from ..errors import ConfigurationError

# SCHED_S_TASK_HAS_NOT_RUN: the task is registered but has never fired.
TASK_HAS_NOT_RUN = 0x41303


class ServiceStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    START_PENDING = "start_pending"
    STOP_PENDING = "stop_pending"
    PAUSED = "paused"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TaskDefinition:
    """Everything a scheduler needs to create the periodic watchdog task."""
    name: str
    command: List[str]
    working_dir: Path
    interval_minutes: int
    description: str = "Restarts the supervised service when its state file goes stale."


class TaskStatus(BaseModel):
    """Snapshot of the scheduled task as reported by the scheduler."""
    name: str
    registered: bool
    state: Optional[str] = None
    last_run_time: Optional[datetime] = None
    last_result: Optional[int] = None
    next_run_time: Optional[datetime] = None

    @property
    def has_run(self) -> bool:
        return self.last_result is not None and self.last_result != TASK_HAS_NOT_RUN

    @property
    def needs_attention(self) -> bool:
        """True when the last run ended with a real failure code."""
        return self.has_run and self.last_result != 0


class ServiceController(ABC):
    @abstractmethod
    def is_installed(self, name: str) -> bool:
        """Check if the service is known to the service manager."""

    @abstractmethod
    def status(self, name: str) -> ServiceStatus:
        """Return the current run state of the service."""

    @abstractmethod
    def restart(self, name: str) -> None:
        """Restart (or start) the service."""


class EventLogReader(ABC):
    @abstractmethod
    def startup_timed_out_at_boot(self, name: str, window_minutes: int) -> bool:
        """Check the boot window for a startup-timeout failure of the service."""


class TaskScheduler(ABC):
    @abstractmethod
    def register(self, task: TaskDefinition) -> None:
        """Create the periodic task, replacing nothing."""

    @abstractmethod
    def unregister(self, name: str) -> None:
        """Remove the task; absent tasks are not an error."""

    @abstractmethod
    def query(self, name: str) -> TaskStatus:
        """Return the task's registration and last-run information."""


class Backends(NamedTuple):
    services: ServiceController
    events: EventLogReader
    scheduler: TaskScheduler


def get_backends(config: WatchdogConfig) -> Backends:
    """Select the OS implementation named by config.backend ('auto' by platform)."""
    backend = config.backend
    if backend == "auto":
        backend = "windows" if paths.is_windows() else "systemd"

    if backend == "windows":
        from .windows import WindowsEventLog, WindowsServiceController, WindowsTaskScheduler
        return Backends(WindowsServiceController(), WindowsEventLog(), WindowsTaskScheduler())
    if backend == "systemd":
        from .systemd import SystemdEventLog, SystemdServiceController, SystemdTaskScheduler
        return Backends(SystemdServiceController(), SystemdEventLog(), SystemdTaskScheduler())
    raise ConfigurationError(f"Unknown backend '{backend}'.")
