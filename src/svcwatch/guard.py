# src/svcwatch/guard.py
"""Decides whether a stale service may be restarted."""

from enum import Enum

from .backends import EventLogReader, ServiceController, ServiceStatus


class RestartDecision(str, Enum):
    RESTART_RUNNING = "was running, restarted"
    RESTART_BOOT_FAILURE = "failed at boot, restarted"
    SKIP_STOPPED = "not restarting, intentionally stopped"

    @property
    def restarts(self) -> bool:
        return self is not RestartDecision.SKIP_STOPPED


def decide_restart(
    service_name: str,
    controller: ServiceController,
    events: EventLogReader,
    boot_window_minutes: int,
) -> RestartDecision:
    """
    Avoid restarting a service an operator stopped on purpose.

    A running service is restarted unconditionally. A service that is not
    running is only restarted when its startup timed out during boot;
    otherwise it is assumed to have been stopped deliberately.
    """
    if controller.status(service_name) == ServiceStatus.RUNNING:
        return RestartDecision.RESTART_RUNNING
    if events.startup_timed_out_at_boot(service_name, boot_window_minutes):
        return RestartDecision.RESTART_BOOT_FAILURE
    return RestartDecision.SKIP_STOPPED
