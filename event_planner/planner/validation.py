from __future__ import annotations

import math
from typing import Any

from event_planner.planner.errors import TimelineValidationError


def validate_event_type(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TimelineValidationError("event_type must be a non-empty string")
    return value.strip()


def validate_guest_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TimelineValidationError("guest_count must be an integer")
    if value <= 0:
        raise TimelineValidationError("guest_count must be greater than 0")
    return value


def validate_budget(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TimelineValidationError("budget must be a number")
    if not math.isfinite(value) or value <= 0:
        raise TimelineValidationError("budget must be greater than 0")
    return float(value)
