"""Tests for data_builders.py record builders and validation."""

from __future__ import annotations

from datetime import UTC, time, timedelta
from zoneinfo import ZoneInfo

from factories import make_chore, make_utc_dt
import pytest

from choreclock import const
from choreclock.data_builders import (
    EntityValidationError,
    build_chore,
    build_schedule,
    chore_to_record,
    schedule_to_record,
    validate_chore_data,
    validate_schedule_data,
)
from choreclock.models import (
    CertainMonths,
    EveryNDays,
    MonthwiseDays,
    Once,
    Schedule,
    WeekdaySet,
    WeeksOfMonthDays,
)

# =============================================================================
# SCHEDULES
# =============================================================================


class TestBuildSchedule:
    """Test build_schedule()."""

    def test_empty_record_gives_defaults(self) -> None:
        """Every field falls back to the defaults."""
        schedule = build_schedule({})
        assert schedule == Schedule()
        assert schedule.active == EveryNDays(1, time(9))
        assert schedule.n_weeks.weekdays.days == [0]
        assert schedule.certain_months.months == (1,)

    def test_every_n_days(self) -> None:
        """The shared time applies to the active variant."""
        schedule = build_schedule({"kind": "n_days", "n_days": "3", "time": "07:30"})
        assert schedule.active == EveryNDays(3, time(7, 30))

    def test_per_variant_time_overrides_shared(self) -> None:
        """A variant's own time key wins over the shared one."""
        schedule = build_schedule(
            {"kind": "monthwise", "time": "07:30", "monthwise_time": "20:15"}
        )
        assert schedule.monthwise.time == time(20, 15)
        assert schedule.n_days.time == time(7, 30)

    def test_weekday_names(self) -> None:
        """Weekdays accept full names and abbreviations in any case."""
        schedule = build_schedule(
            {"kind": "weeks_of_month", "weeks": [4, 2], "weekdays": ["Friday", "mon"]}
        )
        assert schedule.active == WeeksOfMonthDays((2, 4), WeekdaySet.from_days([0, 4]))

    def test_day_range_text(self) -> None:
        """days_of_month accepts day-range text."""
        schedule = build_schedule({"kind": "monthwise", "days_of_month": "1, 4-6"})
        assert schedule.monthwise.days == (1, 4, 5, 6)
        assert schedule.certain_months.days == (1, 4, 5, 6)

    def test_naive_once_at_uses_zone(self, new_york_tz: ZoneInfo) -> None:
        """A naive once_at is read in the given zone."""
        schedule = build_schedule(
            {"kind": "once", "once_at": "2026-03-20T09:00"}, tz=new_york_tz
        )
        assert schedule.active == Once(make_utc_dt(2026, 3, 20, 13))

    def test_update_keeps_existing(self) -> None:
        """Fields missing from the record come from the existing schedule."""
        existing = Schedule.of(MonthwiseDays((5, 20), time(6)))
        schedule = build_schedule({"kind": "n_days"}, existing=existing)
        assert schedule.kind == const.SCHEDULE_KIND_N_DAYS
        assert schedule.monthwise == MonthwiseDays((5, 20), time(6))

    def test_unknown_kind_falls_back(self) -> None:
        """An unknown kind keeps the existing kind, then n_days."""
        existing = Schedule.of(MonthwiseDays((5,)))
        assert build_schedule({"kind": "yearly"}, existing=existing).kind == (
            const.SCHEDULE_KIND_MONTHWISE
        )
        assert build_schedule({"kind": "yearly"}).kind == const.SCHEDULE_KIND_N_DAYS

    def test_invalid_day_range_raises(self) -> None:
        """The day-range message is carried on the error."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_schedule({"days_of_month": "10-5"})
        assert exc_info.value.field == const.DATA_SCHEDULE_DAYS_OF_MONTH
        assert exc_info.value.message == "invalid range '10-5': start must be <= end"

    def test_invalid_time_raises(self) -> None:
        """Malformed times name the time field."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_schedule({"time": "25:00"})
        assert exc_info.value.field == const.DATA_SCHEDULE_TIME

    def test_to_record(self) -> None:
        """Day lists are written as day-range text, weekdays as names."""
        schedule = Schedule.of(
            WeeksOfMonthDays((1, 3), WeekdaySet.from_days([1, 3], time(17, 45)))
        )
        record = schedule_to_record(schedule)
        assert record["kind"] == "weeks_of_month"
        assert record["weekdays"] == ["tuesday", "thursday"]
        assert record["weeks_of_month_time"] == "17:45"
        assert record["days_of_month"] == "1"
        assert build_schedule(record).active == schedule.active

    def test_per_variant_days_override_shared(self) -> None:
        """Per-variant weekday and day keys win over the shared fields."""
        schedule = build_schedule(
            {
                "kind": "monthwise",
                "weekdays": ["monday"],
                "weeks_of_month_weekdays": ["friday"],
                "days_of_month": "1, 15",
                "certain_months_days": [20, 21],
            }
        )
        assert schedule.n_weeks.weekdays.days == [0]
        assert schedule.weeks_of_month.weekdays.days == [4]
        assert schedule.monthwise.days == (1, 15)
        assert schedule.certain_months.days == (20, 21)

    def test_to_record_keeps_every_variant(self) -> None:
        """Inactive variants are written under their own keys."""
        schedule = Schedule(
            kind=const.SCHEDULE_KIND_MONTHWISE,
            monthwise=MonthwiseDays((1, 15), time(8)),
            weeks_of_month=WeeksOfMonthDays((2,), WeekdaySet.from_days([4])),
            certain_months=CertainMonths((6,), (20, 21), time(7)),
        )
        record = schedule_to_record(schedule)
        assert record["days_of_month"] == "1, 15"
        assert record["certain_months_days"] == "20-21"
        assert record["weeks_of_month_weekdays"] == ["friday"]
        assert build_schedule(record) == schedule


class TestValidateScheduleData:
    """Test validate_schedule_data()."""

    def test_valid(self) -> None:
        """A complete valid record has no errors."""
        assert validate_schedule_data(
            {"kind": "certain_months", "months": [2, 3], "days_of_month": [15]}
        ) == {}

    def test_collects_every_error(self) -> None:
        """Each invalid field gets its own message."""
        errors = validate_schedule_data(
            {
                "kind": "yearly",
                "n_days": 0,
                "time": "25:00",
                "weeks": [6],
                "weekdays": ["funday"],
                "days_of_month": "32",
            }
        )
        assert set(errors) == {
            "kind",
            "n_days",
            "time",
            "weeks",
            "weekdays",
            "days_of_month",
        }
        assert errors["time"] == "invalid time '25:00', expected HH:MM"
        assert errors["weekdays"] == "unknown weekday 'funday'"
        assert errors["days_of_month"] == "day 32 is out of range (1-31)"

    def test_empty_day_list(self) -> None:
        """An empty day list asks for at least one day."""
        assert validate_schedule_data({"days_of_month": []}) == {
            "days_of_month": "enter at least one day"
        }


# =============================================================================
# CHORES
# =============================================================================


class TestBuildChore:
    """Test build_chore()."""

    def test_create_with_defaults(self) -> None:
        """Only the name is required."""
        chore = build_chore({"name": "  Dishes "})
        assert chore.name == "Dishes"
        assert chore.id
        assert chore.alerting_time == timedelta(minutes=1440)
        assert chore.completeable is True
        assert chore.schedule == Schedule()
        assert chore.created_at is None
        assert chore.completions == ()

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_required(self, name: str | None) -> None:
        """Blank names are rejected."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_chore({"name": name})  # type: ignore[typeddict-item]
        assert exc_info.value.field == const.DATA_CHORE_NAME
        assert str(exc_info.value) == "chore name is required"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (90, timedelta(minutes=90)),
            ("1d 6h", timedelta(days=1, hours=6)),
            ("45", timedelta(minutes=45)),
            (0, timedelta(0)),
        ],
    )
    def test_alerting_time(self, value: int | str, expected: timedelta) -> None:
        """Alerting time accepts minutes or a duration string."""
        chore = build_chore({"name": "Dishes", "alerting_time": value})
        assert chore.alerting_time == expected

    @pytest.mark.parametrize("value", ["soon", -5, True])
    def test_invalid_alerting_time(self, value: object) -> None:
        """Unparseable or negative alerting times are rejected."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_chore({"name": "Dishes", "alerting_time": value})  # type: ignore[typeddict-item]
        assert exc_info.value.field == const.DATA_CHORE_ALERTING_TIME

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("false", False), ("0", False), ("off", False), ("True", True), (1, True)],
    )
    def test_completeable_form_values(self, value: object, expected: bool) -> None:
        """Form strings are read as booleans, so "false" means False."""
        chore = build_chore({"name": "Bins", "completeable": value})  # type: ignore[typeddict-item]
        assert chore.completeable is expected

    def test_invalid_completeable(self) -> None:
        """Values that are not booleans are rejected."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_chore({"name": "Bins", "completeable": "maybe"})  # type: ignore[typeddict-item]
        assert exc_info.value.field == const.DATA_CHORE_COMPLETEABLE
        assert validate_chore_data({"name": "Bins", "completeable": "maybe"}) == {
            "completeable": "invalid completeable flag 'maybe', expected true or false"
        }

    def test_update_preserves_fields(self) -> None:
        """Fields not in the record keep their existing values."""
        existing = make_chore(
            "Dishes",
            MonthwiseDays((3,)),
            id="chore-1",
            completeable=False,
            completions=[make_utc_dt(2026, 3, 3)],
        )
        chore = build_chore({"alerting_time": 30}, existing=existing)
        assert chore.id == "chore-1"
        assert chore.name == "Dishes"
        assert chore.schedule == existing.schedule
        assert chore.completeable is False
        assert chore.completions == existing.completions
        assert chore.alerting_time == timedelta(minutes=30)

    def test_lifetime_and_completions(self, new_york_tz: ZoneInfo) -> None:
        """Date/times parse to UTC; naive ones use the given zone."""
        chore = build_chore(
            {
                "name": "Dishes",
                "created_at": "2026-01-15T09:00",
                "deleted_at": None,
                "completions": [
                    {"id": 7, "completed_at": "2026-03-10T12:30:00+00:00"},
                ],
            },
            tz=new_york_tz,
        )
        assert chore.created_at == make_utc_dt(2026, 1, 15, 14)
        assert chore.created_at.tzinfo == UTC
        assert chore.deleted_at is None
        assert chore.completions[0].id == 7
        assert chore.completions[0].completed_at == make_utc_dt(2026, 3, 10, 12, 30)

    def test_invalid_created_at(self) -> None:
        """Unparseable date/times name their field."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_chore({"name": "Dishes", "created_at": "someday"})
        assert exc_info.value.field == const.DATA_CHORE_CREATED_AT

    def test_record_round_trip(self) -> None:
        """chore_to_record() output builds back into the same chore."""
        original = make_chore(
            "Bins",
            WeeksOfMonthDays((2, 4), WeekdaySet.from_days([4], time(18))),
            id="bins",
            details="Green bin first",
            alerting_time=timedelta(hours=6),
            created_at=make_utc_dt(2026, 1, 1),
            completions=[make_utc_dt(2026, 3, 13, 19)],
        )
        rebuilt = build_chore(chore_to_record(original))
        assert rebuilt.schedule.active == original.schedule.active
        assert rebuilt.schedule.kind == original.schedule.kind
        assert (rebuilt.id, rebuilt.name) == ("bins", "Bins")
        assert rebuilt.details == "Green bin first"
        assert rebuilt.alerting_time == original.alerting_time
        assert rebuilt.created_at == original.created_at
        assert rebuilt.completions == original.completions


class TestValidateChoreData:
    """Test validate_chore_data()."""

    def test_valid(self) -> None:
        """A plain record passes."""
        assert validate_chore_data({"name": "Dishes", "alerting_time": "2h"}) == {}

    def test_blank_name(self) -> None:
        """Create mode requires a name."""
        assert validate_chore_data({"name": " "}) == {"name": "chore name is required"}

    def test_update_without_name(self) -> None:
        """Update mode may omit the name."""
        assert validate_chore_data({"alerting_time": 5}, is_update=True) == {}

    def test_duplicate_name(self) -> None:
        """Names must be unique among live chores, ignoring case."""
        existing = [
            make_chore("Dishes", id="a"),
            make_chore("Old", id="b", deleted_at=make_utc_dt(2026, 1, 1)),
        ]
        assert validate_chore_data({"name": "dishes"}, existing) == {
            "name": "a chore named 'dishes' already exists"
        }
        assert validate_chore_data({"name": "Old"}, existing) == {}
        assert (
            validate_chore_data(
                {"name": "Dishes"}, existing, is_update=True, current_chore_id="a"
            )
            == {}
        )

    def test_nested_schedule_errors(self) -> None:
        """Schedule errors are reported with the schedule's own keys."""
        errors = validate_chore_data(
            {
                "name": "Dishes",
                "alerting_time": "soon",
                "schedule": {"days_of_month": "10-5"},
            }
        )
        assert errors == {
            "alerting_time": "invalid alerting time 'soon'",
            "days_of_month": "invalid range '10-5': start must be <= end",
        }
