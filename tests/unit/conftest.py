# tests/unit/conftest.py
import logging
from pathlib import Path
from typing import Dict, List

import orjson
import pytest

from svcwatch.backends import (
    EventLogReader,
    ServiceController,
    ServiceStatus,
    TaskDefinition,
    TaskScheduler,
    TaskStatus,
)
from svcwatch.config import WatchdogConfig

NOW = 1_700_000_000


class FakeServices(ServiceController):
    def __init__(self, status: ServiceStatus = ServiceStatus.RUNNING, installed: bool = True):
        self._status = status
        self.installed = installed
        self.restarted: List[str] = []

    def is_installed(self, name: str) -> bool:
        return self.installed

    def status(self, name: str) -> ServiceStatus:
        return self._status

    def restart(self, name: str) -> None:
        self.restarted.append(name)


class FakeEvents(EventLogReader):
    def __init__(self, timed_out: bool = False):
        self.timed_out = timed_out
        self.queries = 0

    def startup_timed_out_at_boot(self, name: str, window_minutes: int) -> bool:
        self.queries += 1
        return self.timed_out


class FakeScheduler(TaskScheduler):
    """Rejects duplicate registration, like Register-ScheduledTask without -Force."""

    def __init__(self):
        self.tasks: Dict[str, TaskDefinition] = {}
        self.status = None

    def register(self, task: TaskDefinition) -> None:
        if task.name in self.tasks:
            raise RuntimeError(f"task {task.name} already exists")
        self.tasks[task.name] = task

    def unregister(self, name: str) -> None:
        self.tasks.pop(name, None)

    def query(self, name: str) -> TaskStatus:
        if self.status is not None:
            return self.status
        return TaskStatus(name=name, registered=name in self.tasks)


@pytest.fixture
def cfg(tmp_path: Path) -> WatchdogConfig:
    return WatchdogConfig(install_dir=tmp_path, service_name="demo-svc", task_name="demo-watch")


@pytest.fixture
def write_state(cfg: WatchdogConfig):
    def _write(last_update_ts: int) -> Path:
        cfg.state_file.write_bytes(orjson.dumps({"last_update_ts": last_update_ts}))
        return cfg.state_file
    return _write


@pytest.fixture
def clock():
    return lambda: float(NOW)


@pytest.fixture(autouse=True)
def reset_svcwatch_logger():
    yield
    logger = logging.getLogger("svcwatch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
