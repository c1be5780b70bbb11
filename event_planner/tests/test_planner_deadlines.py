from __future__ import annotations

from datetime import date

import pytest

from event_planner.planner.deadlines import CalendarOffset, compute_deadline, parse_iso_date
from event_planner.planner.errors import TimelineValidationError


def test_compute_deadline_subtracts_calendar_durations() -> None:
    event_date = date(2025, 12, 20)

    assert compute_deadline(event_date, CalendarOffset(months=6)) == date(2025, 6, 20)
    assert compute_deadline(event_date, CalendarOffset(weeks=3)) == date(2025, 11, 29)
    assert compute_deadline(event_date, CalendarOffset(days=1)) == date(2025, 12, 19)
    assert compute_deadline(event_date, CalendarOffset()) == event_date


def test_compute_deadline_after_event() -> None:
    offset = CalendarOffset(weeks=2, after_event=True)
    assert compute_deadline(date(2025, 12, 20), offset) == date(2026, 1, 3)


def test_month_subtraction_clamps_to_month_end() -> None:
    assert compute_deadline(date(2025, 3, 31), CalendarOffset(months=1)) == date(2025, 2, 28)
    assert compute_deadline(date(2024, 3, 31), CalendarOffset(months=1)) == date(2024, 2, 29)
    assert compute_deadline(date(2026, 3, 31), CalendarOffset(months=4)) == date(2025, 11, 30)


def test_parse_iso_date_accepts_date_only() -> None:
    assert parse_iso_date("2026-04-01") == date(2026, 4, 1)


@pytest.mark.parametrize(
    "value",
    ["2026-04-01T00:00:00Z", "2026-13-01", "2026-02-30", "01/04/2026", "", 20260401, None],
)
def test_parse_iso_date_rejects_anything_but_calendar_dates(value: object) -> None:
    with pytest.raises(TimelineValidationError, match="ISO date string"):
        parse_iso_date(value)


@pytest.mark.parametrize(
    "event_date,offset",
    [
        (date(9999, 12, 25), CalendarOffset(weeks=2, after_event=True)),
        (date(1, 3, 1), CalendarOffset(months=8)),
    ],
)
def test_deadlines_outside_the_calendar_are_rejected(
    event_date: date, offset: CalendarOffset
) -> None:
    with pytest.raises(TimelineValidationError, match="out of the supported range"):
        compute_deadline(event_date, offset)
