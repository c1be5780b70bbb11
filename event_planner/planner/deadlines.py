from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from dateutil.relativedelta import relativedelta

from event_planner.planner.errors import TimelineValidationError

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class CalendarOffset:
    """A calendar duration measured from the event date.

    Offsets point backwards (before the event) unless ``after_event`` is set.
    """

    months: int = 0
    weeks: int = 0
    days: int = 0
    after_event: bool = False

    def as_relativedelta(self) -> relativedelta:
        delta = relativedelta(months=self.months, weeks=self.weeks, days=self.days)
        return delta if self.after_event else -delta


def parse_iso_date(value: Any) -> date:
    if not isinstance(value, str) or not _ISO_DATE_PATTERN.fullmatch(value):
        raise TimelineValidationError(
            "event_date must be an ISO date string (YYYY-MM-DD)"
        )
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise TimelineValidationError(
            "event_date must be an ISO date string (YYYY-MM-DD)"
        ) from exc


def compute_deadline(event_date: date, offset: CalendarOffset) -> date:
    try:
        return event_date + offset.as_relativedelta()
    except (OverflowError, ValueError) as exc:
        raise TimelineValidationError("event_date is out of the supported range") from exc
