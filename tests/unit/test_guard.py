# tests/unit/test_guard.py
import pytest

from conftest import FakeEvents, FakeServices
from svcwatch.backends import ServiceStatus
from svcwatch.guard import RestartDecision, decide_restart


@pytest.mark.parametrize("timed_out", [True, False])
def test_running_service_is_always_restarted(timed_out):
    events = FakeEvents(timed_out=timed_out)
    decision = decide_restart("demo-svc", FakeServices(ServiceStatus.RUNNING), events, 10)

    assert decision is RestartDecision.RESTART_RUNNING
    assert decision.restarts
    assert events.queries == 0


def test_stopped_service_without_boot_failure_is_left_alone():
    decision = decide_restart(
        "demo-svc", FakeServices(ServiceStatus.STOPPED), FakeEvents(timed_out=False), 10
    )
    assert decision is RestartDecision.SKIP_STOPPED
    assert not decision.restarts


def test_stopped_service_that_timed_out_at_boot_is_restarted():
    decision = decide_restart(
        "demo-svc", FakeServices(ServiceStatus.STOPPED), FakeEvents(timed_out=True), 10
    )
    assert decision is RestartDecision.RESTART_BOOT_FAILURE
    assert decision.restarts


def test_boot_window_is_passed_to_event_log(mocker):
    events = mocker.Mock()
    events.startup_timed_out_at_boot.return_value = False

    decide_restart("demo-svc", FakeServices(ServiceStatus.PAUSED), events, 15)

    events.startup_timed_out_at_boot.assert_called_once_with("demo-svc", 15)
