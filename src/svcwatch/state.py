# src/svcwatch/state.py
"""Reads the supervised service's state file and judges its freshness."""

import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import orjson
from pydantic import BaseModel, ValidationError

from .config import WatchdogConfig
from .errors import ConfigurationError, StateFileError

Clock = Callable[[], float]


class StateRecord(BaseModel):
    """The JSON document written by the supervised service."""
    last_update_ts: int


class Health(str, Enum):
    HEALTHY = "healthy"
    STALE = "stale"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class StateCheck:
    health: Health
    threshold: int
    message: str
    elapsed: Optional[int] = None


def validate_threshold(threshold: Optional[int]) -> int:
    """Return the threshold, or raise ConfigurationError unless it is a positive integer."""
    if not threshold or threshold <= 0:
        raise ConfigurationError(
            "A positive --threshold (seconds) is required, e.g. --threshold 300."
        )
    return threshold


def read_state(path: Path) -> StateRecord:
    """Parse the state file. The caller checks for its existence."""
    try:
        return StateRecord.model_validate(orjson.loads(path.read_bytes()))
    except OSError as e:
        raise StateFileError(f"Failed to read state file '{path}': {e}") from e
    except orjson.JSONDecodeError as e:
        raise StateFileError(f"State file '{path}' is not valid JSON: {e}") from e
    except ValidationError as e:
        raise StateFileError(f"State file '{path}' has no usable last_update_ts:\n{e}") from e


def check_state(config: WatchdogConfig, threshold: int, clock: Clock = time.time) -> StateCheck:
    """
    Compare the state file's last_update_ts against the current Unix time.

    `clock` must return epoch seconds (time.time() does, independent of the
    local timezone). A missing state file is INDETERMINATE, never STALE.
    """
    threshold = validate_threshold(threshold)
    state_file = config.state_file

    if not state_file.is_file():
        return StateCheck(
            Health.INDETERMINATE, threshold, f"State file {state_file} not found, not checked"
        )

    record = read_state(state_file)
    elapsed = int(clock()) - record.last_update_ts

    if elapsed > threshold:
        health, relation = Health.STALE, ">"
    elif elapsed == threshold:
        health, relation = Health.HEALTHY, "="
    else:
        health, relation = Health.HEALTHY, "<"

    message = f"Last update {elapsed} seconds ago ({relation} {threshold})"
    return StateCheck(health, threshold, message, elapsed)
