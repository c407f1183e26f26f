# src/svcwatch/watchdog.py
"""A single health-check run: state check, restart guard, restart."""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .backends import EventLogReader, ServiceController
from .config import WatchdogConfig
from .guard import RestartDecision, decide_restart
from .state import Clock, Health, StateCheck, check_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOutcome:
    check: StateCheck
    decision: Optional[RestartDecision] = None

    @property
    def restarted(self) -> bool:
        return self.decision is not None and self.decision.restarts


def run_check(
    config: WatchdogConfig,
    threshold: int,
    controller: ServiceController,
    events: EventLogReader,
    clock: Clock = time.time,
) -> CheckOutcome:
    """
    Run the watchdog once and restart the service if it is stale.

    Logs the elapsed time and threshold on every checked run, plus the
    restart decision for a stale service. Errors from the restart call
    itself are not handled here and end the run.
    """
    check = check_state(config, threshold, clock)

    if check.health is Health.INDETERMINATE:
        logger.error(check.message)
        return CheckOutcome(check)

    if check.health is Health.HEALTHY:
        logger.info(check.message)
        return CheckOutcome(check)

    # The elapsed line is written before any OS call.
    logger.warning(check.message)
    decision = decide_restart(
        config.service_name, controller, events, config.boot_window_minutes
    )
    if decision.restarts:
        controller.restart(config.service_name)
        logger.warning(f"Service {config.service_name} {decision.value}")
    else:
        logger.info(f"Service {config.service_name} {decision.value}")
    return CheckOutcome(check, decision)
