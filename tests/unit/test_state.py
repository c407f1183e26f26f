# tests/unit/test_state.py
import pytest

from conftest import NOW
from svcwatch.errors import ConfigurationError, StateFileError
from svcwatch.state import Health, check_state, read_state


@pytest.mark.parametrize(
    "elapsed, threshold, expected",
    [
        (0, 1, Health.HEALTHY),
        (30, 90, Health.HEALTHY),
        (299, 300, Health.HEALTHY),
        (300, 300, Health.HEALTHY),
        (301, 300, Health.STALE),
        (86_400, 300, Health.STALE),
    ],
)
def test_check_state_compares_elapsed_with_threshold(cfg, write_state, clock, elapsed, threshold, expected):
    write_state(NOW - elapsed)

    result = check_state(cfg, threshold, clock)

    assert result.health is expected
    assert result.elapsed == elapsed
    assert result.threshold == threshold


def test_check_state_healthy_message(cfg, write_state, clock):
    write_state(NOW - 30)
    result = check_state(cfg, 90, clock)
    assert result.message == "Last update 30 seconds ago (< 90)"


def test_check_state_boundary_message(cfg, write_state, clock):
    write_state(NOW - 90)
    result = check_state(cfg, 90, clock)
    assert result.health is Health.HEALTHY
    assert result.message == "Last update 90 seconds ago (= 90)"


def test_check_state_stale_message(cfg, write_state, clock):
    write_state(NOW - 400)
    result = check_state(cfg, 300, clock)
    assert result.message == "Last update 400 seconds ago (> 300)"


def test_missing_state_file_is_indeterminate(cfg, clock):
    result = check_state(cfg, 300, clock)

    assert result.health is Health.INDETERMINATE
    assert result.elapsed is None
    assert "not found" in result.message


@pytest.mark.parametrize("threshold", [0, -5, None])
def test_non_positive_threshold_is_rejected(cfg, write_state, clock, threshold):
    write_state(NOW)
    with pytest.raises(ConfigurationError, match="threshold"):
        check_state(cfg, threshold, clock)


def test_fractional_clock_is_truncated(cfg, write_state):
    write_state(NOW - 10)
    result = check_state(cfg, 60, lambda: NOW + 0.9)
    assert result.elapsed == 10


def test_read_state_ignores_extra_fields(cfg):
    cfg.state_file.write_text('{"last_update_ts": 1663263000, "connected": true}')
    assert read_state(cfg.state_file).last_update_ts == 1663263000


def test_read_state_invalid_json(cfg):
    cfg.state_file.write_text("{not json")
    with pytest.raises(StateFileError, match="not valid JSON"):
        read_state(cfg.state_file)


def test_read_state_missing_field(cfg):
    cfg.state_file.write_text('{"connected": true}')
    with pytest.raises(StateFileError, match="last_update_ts"):
        read_state(cfg.state_file)
