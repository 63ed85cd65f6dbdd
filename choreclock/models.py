"""Value objects for schedules and chores.

Schedules and chores are immutable dataclasses built by data_builders from
storage/form records and passed into the engines. The engines never mutate
them.

A Schedule keeps one parameter set per recurrence kind. Only the set named
by `kind` is active; the others stay inert so switching kinds in an editor
and back again does not lose what was entered.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, time, timedelta

from . import const


@dataclass(frozen=True)
class WeekdaySet:
    """Seven weekday flags plus the wall-clock time the occurrence is due."""

    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False
    time: time = const.DEFAULT_DUE_TIME

    @classmethod
    def from_days(
        cls, days: Iterable[int], at: time = const.DEFAULT_DUE_TIME
    ) -> WeekdaySet:
        """Build from weekday numbers (Monday == 0)."""
        active = set(days)
        return cls(
            *(weekday in active for weekday in range(const.DAYS_PER_WEEK)),
            time=at,
        )

    def active(self, weekday: int) -> bool:
        """Return whether the weekday (Monday == 0) is active."""
        return (
            self.monday,
            self.tuesday,
            self.wednesday,
            self.thursday,
            self.friday,
            self.saturday,
            self.sunday,
        )[weekday]

    @property
    def days(self) -> list[int]:
        """Active weekday numbers in ascending order."""
        return [d for d in range(const.DAYS_PER_WEEK) if self.active(d)]


# =============================================================================
# Schedule variants
# =============================================================================


@dataclass(frozen=True)
class EveryNDays:
    """Every `days` days at `time`, counted from the current local date."""

    days: int = const.DEFAULT_N_DAYS
    time: time = const.DEFAULT_DUE_TIME


@dataclass(frozen=True)
class EveryNWeeks:
    """On the active weekdays; `weeks` bounds how far the search looks."""

    weeks: int = const.DEFAULT_N_WEEKS
    weekdays: WeekdaySet = field(
        default_factory=lambda: WeekdaySet.from_days(const.DEFAULT_WEEKDAYS)
    )


@dataclass(frozen=True)
class MonthwiseDays:
    """On certain days of every month, e.g. the 1st and 15th."""

    days: tuple[int, ...] = tuple(const.DEFAULT_DAYS_OF_MONTH)
    time: time = const.DEFAULT_DUE_TIME


@dataclass(frozen=True)
class WeeksOfMonthDays:
    """On the active weekdays of certain weeks of the month.

    E.g. the 2nd and 4th Friday. Week 1 is days 1-7, week 5 is days 29-31.
    """

    weeks: tuple[int, ...] = tuple(const.DEFAULT_WEEKS_OF_MONTH)
    weekdays: WeekdaySet = field(
        default_factory=lambda: WeekdaySet.from_days(const.DEFAULT_WEEKDAYS)
    )


@dataclass(frozen=True)
class CertainMonths:
    """On certain days of certain months, e.g. the 15th of February and March."""

    months: tuple[int, ...] = tuple(const.DEFAULT_MONTHS)
    days: tuple[int, ...] = tuple(const.DEFAULT_DAYS_OF_MONTH)
    time: time = const.DEFAULT_DUE_TIME


@dataclass(frozen=True)
class Once:
    """A single occurrence at a fixed instant."""

    at: datetime = datetime(1970, 1, 1, 9, 0, tzinfo=UTC)


ScheduleVariant = (
    EveryNDays | EveryNWeeks | MonthwiseDays | WeeksOfMonthDays | CertainMonths | Once
)


@dataclass(frozen=True)
class Schedule:
    """Tagged schedule: `kind` selects which parameter set is active."""

    kind: str = const.SCHEDULE_KIND_N_DAYS
    n_days: EveryNDays = field(default_factory=EveryNDays)
    n_weeks: EveryNWeeks = field(default_factory=EveryNWeeks)
    monthwise: MonthwiseDays = field(default_factory=MonthwiseDays)
    weeks_of_month: WeeksOfMonthDays = field(default_factory=WeeksOfMonthDays)
    certain_months: CertainMonths = field(default_factory=CertainMonths)
    once: Once = field(default_factory=Once)

    @property
    def active(self) -> ScheduleVariant:
        """Return the parameter set selected by `kind`."""
        match self.kind:
            case const.SCHEDULE_KIND_N_DAYS:
                return self.n_days
            case const.SCHEDULE_KIND_N_WEEKS:
                return self.n_weeks
            case const.SCHEDULE_KIND_MONTHWISE:
                return self.monthwise
            case const.SCHEDULE_KIND_WEEKS_OF_MONTH:
                return self.weeks_of_month
            case const.SCHEDULE_KIND_CERTAIN_MONTHS:
                return self.certain_months
            case const.SCHEDULE_KIND_ONCE:
                return self.once
        raise ValueError(const.ERROR_INVALID_SCHEDULE_KIND.format(kind=self.kind))

    def with_kind(self, kind: str) -> Schedule:
        """Return a copy with another kind active, keeping all parameter sets."""
        if kind not in const.SCHEDULE_KIND_OPTIONS:
            raise ValueError(const.ERROR_INVALID_SCHEDULE_KIND.format(kind=kind))
        return replace(self, kind=kind)

    @classmethod
    def of(cls, variant: ScheduleVariant) -> Schedule:
        """Build a schedule whose active kind is the given variant."""
        match variant:
            case EveryNDays():
                return cls(kind=const.SCHEDULE_KIND_N_DAYS, n_days=variant)
            case EveryNWeeks():
                return cls(kind=const.SCHEDULE_KIND_N_WEEKS, n_weeks=variant)
            case MonthwiseDays():
                return cls(kind=const.SCHEDULE_KIND_MONTHWISE, monthwise=variant)
            case WeeksOfMonthDays():
                return cls(
                    kind=const.SCHEDULE_KIND_WEEKS_OF_MONTH, weeks_of_month=variant
                )
            case CertainMonths():
                return cls(
                    kind=const.SCHEDULE_KIND_CERTAIN_MONTHS, certain_months=variant
                )
            case Once():
                return cls(kind=const.SCHEDULE_KIND_ONCE, once=variant)
        raise TypeError(f"Unsupported schedule variant: {variant!r}")


# =============================================================================
# Chores
# =============================================================================


@dataclass(frozen=True)
class Completion:
    """A recorded completion of a chore (owned by the storage layer)."""

    id: int
    completed_at: datetime


@dataclass(frozen=True)
class Chore:
    """A chore or, when not completeable, a recurring event/reminder.

    Attributes:
        id: Storage identifier (opaque to the engines)
        name: Display name
        details: Free text (opaque to the engines)
        schedule: When the chore recurs
        alerting_time: How long before a due instant the chore is "upcoming"
        completeable: False for pure events with no completion concept
        created_at: Chore is inactive before this instant (if set)
        deleted_at: Chore is inactive after this instant (if set)
        completions: Completion history, in any order
    """

    name: str
    schedule: Schedule = field(default_factory=Schedule)
    id: str = ""
    details: str = ""
    alerting_time: timedelta = const.DEFAULT_ALERTING_TIME
    completeable: bool = const.DEFAULT_COMPLETEABLE
    created_at: datetime | None = None
    deleted_at: datetime | None = None
    completions: tuple[Completion, ...] = ()
