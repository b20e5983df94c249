# crosspost/services/social/poller.py

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Tuple

from ...utils.logger import Log


READY = "ready"
FAILED = "failed"
TIMED_OUT = "timed_out"

# check_fn returns (state, raw) where state is one of these
STATE_READY = "FINISHED"
STATE_ERROR = "ERROR"
STATE_PENDING = "IN_PROGRESS"

# container states that end polling as a failure
ERROR_STATES = frozenset({STATE_ERROR, "EXPIRED"})


def wait_until_ready(
    resource_id: str,
    check_fn: Callable[[str], Tuple[str, Dict[str, Any]]],
    max_attempts: int,
    interval_seconds: float,
    *,
    sleep: Callable[[float], None] = time.sleep,
    log_tag: str = "",
) -> Tuple[str, Dict[str, Any]]:
    """
    Poll `check_fn(resource_id)` on a fixed interval.

    Returns (READY|FAILED|TIMED_OUT, last_raw). ERROR or EXPIRED ends polling at once.
    There is no sleep after the final attempt.
    """
    last: Dict[str, Any] = {}
    for attempt in range(1, max_attempts + 1):
        state, last = check_fn(resource_id)
        state = (state or "").upper()

        if state == STATE_READY:
            return READY, last
        if state in ERROR_STATES:
            Log.info(f"{log_tag} resource {resource_id} reported {state} on attempt {attempt}: {last}")
            return FAILED, last

        if attempt < max_attempts:
            sleep(interval_seconds)

    Log.info(f"{log_tag} resource {resource_id} not ready after {max_attempts} attempts")
    return TIMED_OUT, last
