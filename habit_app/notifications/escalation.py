"""Escalation policy: extra reminder instants later in the day."""

from datetime import time
from typing import Optional, Sequence

from ..config.defaults import EscalationParams
from ..utils.time import minutes_of_day, parse_time_of_day, time_from_minutes


def escalate(base: Sequence[time], cap: int, params: Optional[EscalationParams] = None) -> list[time]:
    """
    Append reminder instants after the latest base instant.

    New instants are spaced ``interval_minutes`` apart and stop at
    ``day_end`` or when ``cap`` instants exist. Base instants are never
    removed or reordered.

    Args:
        base: Reminder instants configured by the user
        cap: Maximum total number of instants
        params: Spacing parameters, defaults to ``EscalationParams()``

    Returns:
        Base instants followed by the synthesized ones
    """
    params = params or EscalationParams()
    instants = list(base)

    if not instants or params.interval_minutes <= 0:
        return instants

    day_end = minutes_of_day(parse_time_of_day(params.day_end))
    next_slot = minutes_of_day(max(instants)) + params.interval_minutes

    while len(instants) < cap and next_slot <= day_end:
        instants.append(time_from_minutes(next_slot))
        next_slot += params.interval_minutes

    return instants
