"""Month calendar data for a single chore.

Builds the data behind a chore's month view: Sunday-first weeks of day
cells, each marked with the due time (if the schedule has an occurrence that
day) and whether that occurrence was completed. Rendering is left to the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from . import const
from .engines import schedule_engine
from .utils.dt_utils import as_local, days_in_month, dt_localize

if TYPE_CHECKING:
    from .models import Chore


@dataclass(frozen=True)
class CalendarDay:
    """One day cell of the month grid.

    Attributes:
        day: The calendar date
        is_today: Whether `day` is the local date of `now`
        due_time: Local time of the occurrence that day, None if not due
        completed: Whether that occurrence was completed before the next one
    """

    day: date
    is_today: bool = False
    due_time: time | None = None
    completed: bool = False

    @property
    def is_due(self) -> bool:
        """Whether the schedule has an occurrence on this day."""
        return self.due_time is not None


@dataclass(frozen=True)
class MonthGrid:
    """A month laid out as Sunday-first weeks; padding cells are None."""

    year: int
    month: int
    weeks: list[list[CalendarDay | None]] = field(default_factory=list)
    headers: tuple[str, ...] = tuple(const.CALENDAR_WEEKDAY_HEADERS)

    @property
    def title(self) -> str:
        """Month title, e.g. "March 2026"."""
        return date(self.year, self.month, 1).strftime("%B %Y")

    @property
    def days(self) -> list[CalendarDay]:
        """All non-padding cells in date order."""
        return [cell for week in self.weeks for cell in week if cell is not None]

    def previous_month(self) -> tuple[int, int]:
        """(year, month) of the month before this one."""
        prev = date(self.year, self.month, 1) - relativedelta(months=1)
        return prev.year, prev.month

    def next_month(self) -> tuple[int, int]:
        """(year, month) of the month after this one."""
        nxt = date(self.year, self.month, 1) + relativedelta(months=1)
        return nxt.year, nxt.month


def _is_completed(
    chore: Chore, due: datetime, now: datetime, tz: tzinfo
) -> bool:
    """Check for a completion in (due, next occurrence after due]."""
    if not chore.completions:
        return False
    window_end = schedule_engine.next_due_after(chore.schedule, due, now, tz)
    return any(
        due < completion.completed_at <= window_end
        for completion in chore.completions
    )


def build_month_grid(
    chore: Chore, year: int, month: int, now: datetime, tz: tzinfo
) -> MonthGrid:
    """Build the month grid for one chore.

    Args:
        chore: Chore whose schedule and completions fill the cells
        year: Calendar year
        month: Calendar month (1-12)
        now: Reference instant (marks today, anchors EveryNDays)
        tz: Zone the grid is laid out in

    Returns:
        MonthGrid whose first week starts on Sunday; cells before the 1st and
        after the last day are None.
    """
    today = as_local(now, tz).date()
    first = date(year, month, 1)
    at = schedule_engine.time_of_day(chore.schedule.active, tz)

    cells: list[CalendarDay | None] = [None] * ((first.weekday() + 1) % 7)
    for day_number in range(1, days_in_month(year, month) + 1):
        day = date(year, month, day_number)
        if not schedule_engine.is_due_on(chore.schedule, day, today, tz):
            cells.append(CalendarDay(day=day, is_today=day == today))
            continue

        due = dt_localize(day, at, tz)
        cells.append(
            CalendarDay(
                day=day,
                is_today=day == today,
                due_time=as_local(due, tz).time(),
                completed=_is_completed(chore, due, now, tz),
            )
        )

    while len(cells) % const.DAYS_PER_WEEK:
        cells.append(None)

    weeks = [
        cells[start : start + const.DAYS_PER_WEEK]
        for start in range(0, len(cells), const.DAYS_PER_WEEK)
    ]
    return MonthGrid(year=year, month=month, weeks=weeks)
