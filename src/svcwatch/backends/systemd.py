# src/svcwatch/backends/systemd.py
"""Linux implementations on top of systemctl, journald and systemd timers."""

import shlex
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import orjson

from . import (
    EventLogReader,
    ServiceController,
    ServiceStatus,
    TaskDefinition,
    TaskScheduler,
    TaskStatus,
)
from ..shell import run_command

UNIT_DIR = Path("/etc/systemd/system")

_STATUS_MAP = {
    "active": ServiceStatus.RUNNING,
    "reloading": ServiceStatus.RUNNING,
    "inactive": ServiceStatus.STOPPED,
    "failed": ServiceStatus.STOPPED,
    "activating": ServiceStatus.START_PENDING,
    "deactivating": ServiceStatus.STOP_PENDING,
}

TIMEOUT_MARKERS = ("start operation timed out", "failed with result 'timeout'")


def systemctl_show(unit: str, *properties: str) -> Dict[str, str]:
    """Read unit properties via `systemctl show` into a dict."""
    args = ["systemctl", "show", "--timestamp=unix", unit]
    for prop in properties:
        args += ["-p", prop]
    output = run_command(args).stdout
    values = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            values[key.strip()] = value.strip()
    return values


def parse_unix_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse systemctl's `@<seconds>` timestamps; 'n/a' and empty mean None."""
    if not value or not value.startswith("@"):
        return None
    return datetime.fromtimestamp(int(value[1:]), tz=timezone.utc)


class SystemdServiceController(ServiceController):
    def is_installed(self, name: str) -> bool:
        props = systemctl_show(name, "LoadState")
        return props.get("LoadState", "not-found") != "not-found"

    def status(self, name: str) -> ServiceStatus:
        props = systemctl_show(name, "ActiveState")
        return _STATUS_MAP.get(props.get("ActiveState", ""), ServiceStatus.UNKNOWN)

    def restart(self, name: str) -> None:
        run_command(["systemctl", "restart", name])


class SystemdEventLog(EventLogReader):
    """Scans the current boot's journal of the unit for start timeouts."""

    def startup_timed_out_at_boot(self, name: str, window_minutes: int) -> bool:
        output = run_command(
            ["journalctl", "--boot", "--unit", name, "--output", "json", "--no-pager"]
        ).stdout
        window_usec = window_minutes * 60 * 1_000_000
        for line in output.splitlines():
            if not line.startswith("{"):
                continue
            entry = orjson.loads(line)
            if int(entry.get("__MONOTONIC_TIMESTAMP", 0)) > window_usec:
                # Entries are chronological; past the boot window.
                break
            message = entry.get("MESSAGE")
            if isinstance(message, str) and any(m in message.lower() for m in TIMEOUT_MARKERS):
                return True
        return False


class SystemdTaskScheduler(TaskScheduler):
    """Runs the watchdog from a oneshot service triggered by a repeating timer."""

    def __init__(self, unit_dir: Path = UNIT_DIR):
        self.unit_dir = unit_dir

    def _service_path(self, name: str) -> Path:
        return self.unit_dir / f"{name}.service"

    def _timer_path(self, name: str) -> Path:
        return self.unit_dir / f"{name}.timer"

    def register(self, task: TaskDefinition) -> None:
        self.unit_dir.mkdir(parents=True, exist_ok=True)
        self._service_path(task.name).write_text(
            "[Unit]\n"
            f"Description={task.description}\n"
            "\n"
            "[Service]\n"
            "Type=oneshot\n"
            f"WorkingDirectory={task.working_dir}\n"
            f"ExecStart={shlex.join(task.command)}\n"
        )
        self._timer_path(task.name).write_text(
            "[Unit]\n"
            f"Description=Run {task.name} every {task.interval_minutes} minutes\n"
            "\n"
            "[Timer]\n"
            f"OnBootSec={task.interval_minutes}min\n"
            f"OnUnitActiveSec={task.interval_minutes}min\n"
            "AccuracySec=1s\n"
            f"Unit={task.name}.service\n"
            "\n"
            "[Install]\n"
            "WantedBy=timers.target\n"
        )
        run_command(["systemctl", "daemon-reload"])
        run_command(["systemctl", "enable", "--now", f"{task.name}.timer"])

    def unregister(self, name: str) -> None:
        if not self._timer_path(name).exists() and not self._service_path(name).exists():
            return
        run_command(["systemctl", "disable", "--now", f"{name}.timer"], check=False)
        self._timer_path(name).unlink(missing_ok=True)
        self._service_path(name).unlink(missing_ok=True)
        run_command(["systemctl", "daemon-reload"])

    def query(self, name: str) -> TaskStatus:
        if not self._timer_path(name).exists():
            return TaskStatus(name=name, registered=False)

        timer = systemctl_show(
            f"{name}.timer", "ActiveState", "LastTriggerUSec", "NextElapseUSecRealtime"
        )
        last_run = parse_unix_timestamp(timer.get("LastTriggerUSec"))
        last_result = None
        if last_run is not None:
            service = systemctl_show(f"{name}.service", "ExecMainStatus")
            last_result = int(service.get("ExecMainStatus") or 0)

        return TaskStatus(
            name=name,
            registered=True,
            state=timer.get("ActiveState"),
            last_run_time=last_run,
            last_result=last_result,
            next_run_time=parse_unix_timestamp(timer.get("NextElapseUSecRealtime")),
        )
