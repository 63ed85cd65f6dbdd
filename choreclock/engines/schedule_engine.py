"""Schedule Engine for choreclock.

Finds the occurrences of a schedule around a reference instant:
- `most_recent_due` / `find_most_recent_occurrence`: walk backward day by day
- `next_due` / `next_due_after`: walk forward day by day
- `occurrences_between`: every occurrence in a window

All day walks are daily `dateutil.rrule` sequences.

Each variant carries its own search horizon. A walk checks every local
calendar date from day offset 0 up to and including the horizon and converts
matching dates to instants with `dt_localize`, so DST transitions never
raise. Running out of horizon is not an error: the backward walk falls back
to `now - horizon` and the forward walk to `DISTANT_FUTURE`.

IMPORTANT: This module must stay free of storage concerns.
Only import from const.py, models.py, utils/, dateutil and standard libraries.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import TYPE_CHECKING

from dateutil.rrule import DAILY, rrule

from .. import const
from ..models import (
    CertainMonths,
    EveryNDays,
    EveryNWeeks,
    MonthwiseDays,
    Once,
    WeeksOfMonthDays,
)
from ..utils.dt_utils import as_local, dt_localize

if TYPE_CHECKING:
    from ..models import Schedule, ScheduleVariant


# =============================================================================
# Variant predicates
# =============================================================================


def week_ordinal(day: date) -> int:
    """Return the 1-based week of the month a date falls in.

    Days 1-7 are week 1, 8-14 week 2, 15-21 week 3, 22-28 week 4, 29-31
    week 5.
    """
    return (day.day - 1) // const.DAYS_PER_WEEK + 1


def matches(
    variant: ScheduleVariant, day: date, today: date, tz: tzinfo = UTC
) -> bool:
    """Return whether the variant has an occurrence on a local calendar date.

    Args:
        variant: Active schedule parameters
        day: Local calendar date to test
        today: The caller's local date (EveryNDays counts from it)
        tz: Zone used to read Once.at as a local date

    Raises:
        TypeError: For anything that is not a schedule variant.
    """
    match variant:
        case EveryNDays(days=n):
            return abs((day - today).days) % max(1, n) == 0
        case EveryNWeeks(weekdays=weekdays):
            return weekdays.active(day.weekday())
        case MonthwiseDays(days=days):
            return day.day in days
        case WeeksOfMonthDays(weeks=weeks, weekdays=weekdays):
            return weekdays.active(day.weekday()) and week_ordinal(day) in weeks
        case CertainMonths(months=months, days=days):
            return day.month in months and day.day in days
        case Once(at=at):
            return as_local(at, tz).date() == day
    raise TypeError(f"Unsupported schedule variant: {variant!r}")


def time_of_day(variant: ScheduleVariant, tz: tzinfo = UTC) -> time:
    """Return the wall-clock time occurrences of the variant fall on."""
    match variant:
        case EveryNDays(time=at) | MonthwiseDays(time=at) | CertainMonths(time=at):
            return at
        case EveryNWeeks(weekdays=weekdays) | WeeksOfMonthDays(weekdays=weekdays):
            return weekdays.time
        case Once(at=at):
            return as_local(at, tz).time()
    raise TypeError(f"Unsupported schedule variant: {variant!r}")


def search_horizon(variant: ScheduleVariant) -> int:
    """Return how many days either search walks for the variant.

    Examples:
        EveryNDays(days=3) → 3
        EveryNWeeks(weeks=2) → 14
        CertainMonths() → 1461 (four years, so Feb 29 is reachable)
    """
    match variant:
        case EveryNDays(days=n):
            return max(1, n)
        case EveryNWeeks(weeks=weeks):
            return const.DAYS_PER_WEEK * max(1, weeks)
        case MonthwiseDays():
            return const.SEARCH_HORIZON_MONTHWISE
        case WeeksOfMonthDays():
            return const.SEARCH_HORIZON_WEEKS_OF_MONTH
        case CertainMonths():
            return const.SEARCH_HORIZON_CERTAIN_MONTHS
        case Once():
            return const.SEARCH_HORIZON_ONCE
    raise TypeError(f"Unsupported schedule variant: {variant!r}")


def is_due_on(
    schedule: Schedule, day: date, today: date, tz: tzinfo = UTC
) -> bool:
    """Return whether the schedule has an occurrence on a local date."""
    return matches(schedule.active, day, today, tz)


# =============================================================================
# Searches
# =============================================================================


def _walk_days(start: date, horizon: int, *, backward: bool = False) -> list[date]:
    """Return the local dates a search visits, in visiting order.

    Offsets 0..horizon from `start`, i.e. horizon + 1 dates.
    """
    first = start - timedelta(days=horizon) if backward else start
    days = [
        occurrence.date()
        for occurrence in rrule(DAILY, dtstart=first, count=horizon + 1)
    ]
    return days[::-1] if backward else days


def find_most_recent_occurrence(
    schedule: Schedule, now: datetime, tz: tzinfo
) -> datetime | None:
    """Return the latest occurrence at or before `now`, or None.

    Today's occurrence counts as soon as its time has passed. Unlike
    most_recent_due this reports "nothing inside the horizon" as None, which
    status derivation needs to tell a real occurrence from the fallback.
    """
    variant = schedule.active
    if isinstance(variant, Once):
        return variant.at if variant.at <= now else None

    today = as_local(now, tz).date()
    at = time_of_day(variant, tz)
    horizon = search_horizon(variant)

    for day in _walk_days(today, horizon, backward=True):
        if not matches(variant, day, today, tz):
            continue
        instant = dt_localize(day, at, tz)
        if instant <= now:
            return instant

    const.LOGGER.debug(
        "No %s occurrence within %d days before %s", schedule.kind, horizon, now
    )
    return None


def most_recent_due(schedule: Schedule, now: datetime, tz: tzinfo) -> datetime:
    """Return the latest occurrence at or before `now`.

    Returns:
        The occurrence instant (UTC). When the horizon holds no occurrence,
        `now - horizon` instead. For Once, `at` if it has passed, else `now`.
    """
    found = find_most_recent_occurrence(schedule, now, tz)
    if found is not None:
        return found
    return now - timedelta(days=search_horizon(schedule.active))


def next_due_after(
    schedule: Schedule, after: datetime, now: datetime, tz: tzinfo
) -> datetime:
    """Return the first occurrence strictly after an arbitrary instant.

    The walk starts at the local date of `after`; `now` only anchors
    EveryNDays. Returns DISTANT_FUTURE when the horizon holds no occurrence
    (and for a Once schedule whose instant is not after `after`).
    """
    variant = schedule.active
    if isinstance(variant, Once):
        return variant.at if variant.at > after else const.DISTANT_FUTURE

    today = as_local(now, tz).date()
    start = as_local(after, tz).date()
    at = time_of_day(variant, tz)
    horizon = search_horizon(variant)

    for day in _walk_days(start, horizon):
        if not matches(variant, day, today, tz):
            continue
        instant = dt_localize(day, at, tz)
        if instant > after:
            return instant

    const.LOGGER.debug(
        "No %s occurrence within %d days after %s", schedule.kind, horizon, after
    )
    return const.DISTANT_FUTURE


def next_due(schedule: Schedule, now: datetime, tz: tzinfo) -> datetime:
    """Return the first occurrence strictly after `now`.

    Today's occurrence is returned while its time is still ahead. A Once
    schedule always reports its instant, even after it has passed.
    """
    variant = schedule.active
    if isinstance(variant, Once):
        return variant.at
    return next_due_after(schedule, now, now, tz)


def occurrences_between(
    schedule: Schedule, start: datetime, end: datetime, now: datetime, tz: tzinfo
) -> list[datetime]:
    """Return every occurrence in the closed window [start, end], ascending.

    Args:
        schedule: Schedule to expand
        start: Window start (aware)
        end: Window end (aware)
        now: Reference instant, anchors EveryNDays
        tz: Zone occurrences are expressed in

    Returns:
        Occurrence instants in UTC; empty when end < start.
    """
    if end < start:
        return []

    variant = schedule.active
    if isinstance(variant, Once):
        return [variant.at] if start <= variant.at <= end else []

    today = as_local(now, tz).date()
    at = time_of_day(variant, tz)
    first_day = as_local(start, tz).date()
    last_day = as_local(end, tz).date()

    found: list[datetime] = []
    for day_start in rrule(DAILY, dtstart=first_day, until=last_day):
        day = day_start.date()
        if not matches(variant, day, today, tz):
            continue
        instant = dt_localize(day, at, tz)
        if start <= instant <= end:
            found.append(instant)
    return found
