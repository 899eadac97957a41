"""Occurrence date calculation for recurring series."""

import calendar
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from fintrack.exceptions import UnknownRecurrenceType
from fintrack.models.recurring import RecurrenceType


# Occurrences generated at series creation when no end date bounds them
OCCURRENCE_CAPS = {
    RecurrenceType.daily: 30,  # About a month
    RecurrenceType.weekly: 52,  # About a year
    RecurrenceType.monthly: 24,  # Two years
    RecurrenceType.yearly: 5,
}

# Days per unit used to estimate how many occurrences fit in a date span
_SPAN_DIVISORS = {
    RecurrenceType.daily: 1,
    RecurrenceType.weekly: 7,
    RecurrenceType.monthly: 30,
    RecurrenceType.yearly: 365,
}


def _field(series: Any, name: str) -> Any:
    if isinstance(series, dict):
        return series.get(name)
    return getattr(series, name, None)


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def recurrence_unit(value) -> RecurrenceType:
    """Coerce a stored or submitted recurrence type into the enum."""
    if isinstance(value, RecurrenceType):
        return value
    try:
        return RecurrenceType(value)
    except ValueError:
        raise UnknownRecurrenceType(value) from None


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _step(unit: RecurrenceType, interval: int, origin: date, k: int) -> date:
    """The k-th date after origin."""
    if unit == RecurrenceType.daily:
        return origin + timedelta(days=interval * k)
    if unit == RecurrenceType.weekly:
        return origin + timedelta(days=interval * 7 * k)
    if unit == RecurrenceType.monthly:
        return add_months(origin, interval * k)
    return add_months(origin, 12 * interval * k)


def calculate_occurrences(series: Any, start_from: date, count: int = 12) -> List[date]:
    """
    Calculate up to ``count`` occurrence dates following ``start_from``.

    ``series`` is anything exposing recurrence_type, recurrence_interval,
    start_date and end_date (a model instance or a plain dict). The start is
    clamped forward to the series start date and is itself never returned.

    Monthly and yearly steps are measured from the start date rather than
    from the previous occurrence, so a series anchored on the 31st clamps to
    Feb 28 and returns to Mar 31 instead of drifting to the 28th.
    """
    unit = recurrence_unit(_field(series, "recurrence_type"))
    interval = int(_field(series, "recurrence_interval") or 1)
    series_start = _as_date(_field(series, "start_date"))
    series_end = _as_date(_field(series, "end_date"))

    anchor = _as_date(start_from)
    if series_start is not None and (anchor is None or anchor < series_start):
        anchor = series_start

    occurrences: List[date] = []
    for step in range(1, count + 1):
        next_date = _step(unit, interval, anchor, step)
        if series_end is not None and next_date > series_end:
            break
        occurrences.append(next_date)

    return occurrences


def scheduled_occurrences(series: Any, on_or_after: date, count: int = 12) -> List[date]:
    """
    Up to ``count`` dates of the series' own schedule (start_date plus whole
    intervals) that fall on or after ``on_or_after``.

    Unlike calculate_occurrences the schedule never re-anchors, so
    regenerating from an arbitrary day keeps the series on its original
    day of month. The start date belongs to the template and is never
    returned.
    """
    unit = recurrence_unit(_field(series, "recurrence_type"))
    interval = int(_field(series, "recurrence_interval") or 1)
    series_start = _as_date(_field(series, "start_date"))
    series_end = _as_date(_field(series, "end_date"))
    on_or_after = _as_date(on_or_after)

    k = 1
    if on_or_after > series_start:
        if unit in (RecurrenceType.daily, RecurrenceType.weekly):
            step_days = interval * (7 if unit == RecurrenceType.weekly else 1)
            k = max(1, -(-(on_or_after - series_start).days // step_days))
        else:
            step_months = interval * (12 if unit == RecurrenceType.yearly else 1)
            months = (on_or_after.year - series_start.year) * 12 + on_or_after.month - series_start.month
            k = max(1, months // step_months)
            while _step(unit, interval, series_start, k) < on_or_after:
                k += 1

    occurrences: List[date] = []
    while len(occurrences) < count:
        next_date = _step(unit, interval, series_start, k)
        if series_end is not None and next_date > series_end:
            break
        occurrences.append(next_date)
        k += 1

    return occurrences


def occurrence_budget(recurrence_type, start_date: date, end_date: Optional[date]) -> int:
    """
    Number of occurrences to generate when a series is created.

    Open-ended series get a per-unit cap; bounded series get the number of
    units that fit in the span, never more than the same cap.
    """
    unit = recurrence_unit(recurrence_type)
    cap = OCCURRENCE_CAPS[unit]
    if end_date is None:
        return cap

    span_days = (end_date - start_date).days
    return max(0, min(span_days // _SPAN_DIVISORS[unit], cap))
