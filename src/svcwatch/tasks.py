# src/svcwatch/tasks.py
"""Registers, removes and inspects the periodic watchdog task."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .backends import TaskDefinition, TaskScheduler, TaskStatus
from .config import WatchdogConfig
from .errors import ConfigurationError
from .state import validate_threshold

logger = logging.getLogger(__name__)


def build_command(threshold: int, config_path: Optional[Path] = None) -> List[str]:
    """The command line the scheduler runs on every tick."""
    command = [sys.executable, "-m", "svcwatch", "--threshold", str(threshold), "--unattended"]
    if config_path is not None:
        command += ["--config", str(Path(config_path).resolve())]
    return command


def register_task(
    config: WatchdogConfig,
    threshold: int,
    scheduler: TaskScheduler,
    cwd: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> TaskDefinition:
    """
    Create (or replace) the scheduled task that runs the watchdog.

    Preconditions:
        - threshold is a positive number of seconds.
        - The current directory is the install directory, since the task
          runs from there.
        - The state file already exists; otherwise the service integration
          that writes it has not been enabled yet.

    Raises:
        ConfigurationError: If any precondition is not met.
    """
    threshold = validate_threshold(threshold)

    current = Path(cwd or Path.cwd()).resolve()
    install_dir = config.install_dir.resolve()
    if current != install_dir:
        raise ConfigurationError(
            f"Registration must be run from the install directory '{install_dir}' "
            f"(current directory: '{current}')."
        )

    if not config.state_file.is_file():
        raise ConfigurationError(
            f"State file '{config.state_file}' does not exist. Enable the "
            f"'{config.service_name}' state integration before registering the watchdog."
        )

    task = TaskDefinition(
        name=config.task_name,
        command=build_command(threshold, config_path),
        working_dir=install_dir,
        interval_minutes=config.interval_minutes,
    )

    scheduler.unregister(task.name)
    scheduler.register(task)
    logger.info(
        f"Registered task '{task.name}' every {task.interval_minutes} minutes "
        f"with threshold {threshold}s"
    )
    return task


def unregister_task(config: WatchdogConfig, scheduler: TaskScheduler) -> None:
    """Remove the scheduled task. Succeeds if it was never registered."""
    scheduler.unregister(config.task_name)
    logger.info(f"Unregistered task '{config.task_name}'")


def task_status(config: WatchdogConfig, scheduler: TaskScheduler) -> TaskStatus:
    """Query the scheduler for the watchdog task."""
    status = scheduler.query(config.task_name)
    if status.needs_attention:
        logger.warning(
            f"Task '{status.name}' last run failed with result 0x{status.last_result:X}"
        )
    return status
