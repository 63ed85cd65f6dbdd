"""Tests for utils/dt_utils.py.

Covers DST-safe localization, parsing, duration strings and the relative
due-date display.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from factories import make_utc_dt
from freezegun import freeze_time
import pytest

from choreclock.utils.dt_utils import (
    TIME_UNIT_DAYS,
    TIME_UNIT_HOURS,
    as_local,
    as_utc,
    days_in_month,
    dt_format_due,
    dt_format_duration,
    dt_localize,
    dt_now_local,
    dt_now_utc,
    dt_parse,
    dt_parse_date,
    dt_parse_duration,
    dt_parse_time,
    dt_today_local,
)

# =============================================================================
# Localization and DST
# =============================================================================


class TestLocalize:
    """Test dt_localize() across DST transitions."""

    def test_plain_day(self, new_york_tz: ZoneInfo) -> None:
        """A normal winter date uses EST (UTC-5)."""
        result = dt_localize(date(2026, 1, 15), time(9), new_york_tz)
        assert result == make_utc_dt(2026, 1, 15, 14)
        assert result.tzinfo == UTC

    def test_spring_forward_gap_moves_forward(self, new_york_tz: ZoneInfo) -> None:
        """02:30 does not exist on 2026-03-08; it lands on 03:30 EDT."""
        result = dt_localize(date(2026, 3, 8), time(2, 30), new_york_tz)
        assert result == make_utc_dt(2026, 3, 8, 7, 30)
        assert as_local(result, new_york_tz).time() == time(3, 30)

    def test_fall_back_ambiguous_takes_earlier(self, new_york_tz: ZoneInfo) -> None:
        """01:30 happens twice on 2026-11-01; the first (EDT) one wins."""
        result = dt_localize(date(2026, 11, 1), time(1, 30), new_york_tz)
        assert result == make_utc_dt(2026, 11, 1, 5, 30)

    def test_ignores_tzinfo_on_time(self, utc_tz: ZoneInfo) -> None:
        """Only the wall-clock part of the time is used."""
        aware = time(9, tzinfo=ZoneInfo("Asia/Tokyo"))
        assert dt_localize(date(2026, 1, 1), aware, utc_tz) == make_utc_dt(2026, 1, 1, 9)


class TestConversion:
    """Test as_utc() / as_local()."""

    def test_naive_assumed_utc(self, new_york_tz: ZoneInfo) -> None:
        """Naive datetimes are treated as UTC by both helpers."""
        naive = datetime(2026, 1, 1, 12)
        assert as_utc(naive) == make_utc_dt(2026, 1, 1, 12)
        assert as_local(naive, new_york_tz).hour == 7

    def test_round_trip(self, new_york_tz: ZoneInfo) -> None:
        """Converting to local and back keeps the instant."""
        instant = make_utc_dt(2026, 7, 4, 16)
        assert as_utc(as_local(instant, new_york_tz)) == instant


class TestNow:
    """Test wall-clock helpers under a frozen clock."""

    @freeze_time("2026-03-10 03:00:00", tz_offset=0)
    def test_now_utc(self) -> None:
        """dt_now_utc() is aware and follows the clock."""
        assert dt_now_utc() == make_utc_dt(2026, 3, 10, 3)

    @freeze_time("2026-03-10 03:00:00", tz_offset=0)
    def test_today_local_depends_on_zone(self, new_york_tz: ZoneInfo) -> None:
        """03:00 UTC is still the previous evening in New York."""
        assert dt_today_local(new_york_tz) == date(2026, 3, 9)
        assert dt_today_local(UTC) == date(2026, 3, 10)

    @freeze_time("2026-03-10 03:00:00", tz_offset=0)
    def test_now_local(self, new_york_tz: ZoneInfo) -> None:
        """dt_now_local() is the same instant, expressed in the zone."""
        local = dt_now_local(new_york_tz)
        assert local.tzinfo is new_york_tz
        assert local.replace(tzinfo=None) == datetime(2026, 3, 9, 23, 0)
        assert local == make_utc_dt(2026, 3, 10, 3)


# =============================================================================
# Parsing
# =============================================================================


class TestParse:
    """Test dt_parse(), dt_parse_date() and dt_parse_time()."""

    def test_iso_with_offset(self) -> None:
        """Offsets in the string are kept."""
        result = dt_parse("2026-03-10T09:00:00+01:00")
        assert result == make_utc_dt(2026, 3, 10, 8)

    def test_naive_gets_default_zone(self, new_york_tz: ZoneInfo) -> None:
        """Naive strings get the supplied zone."""
        result = dt_parse("2026-01-15T09:00", new_york_tz)
        assert result is not None
        assert result.tzinfo == new_york_tz
        assert as_utc(result) == make_utc_dt(2026, 1, 15, 14)

    def test_date_input(self) -> None:
        """Dates become midnight in the default zone."""
        assert dt_parse(date(2026, 3, 1)) == make_utc_dt(2026, 3, 1, 0)

    def test_us_date_string(self) -> None:
        """Non-ISO date strings fall back to known formats."""
        assert dt_parse_date("03/10/2026") == date(2026, 3, 10)

    def test_free_form_string(self) -> None:
        """Anything else goes through dateutil's parser."""
        assert dt_parse("Jan 5 2026 14:30") == make_utc_dt(2026, 1, 5, 14, 30)

    @pytest.mark.parametrize("value", ["", None, "not a date"])
    def test_unparseable(self, value: str | None) -> None:
        """Empty or garbage input returns None."""
        assert dt_parse(value) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("09:30", time(9, 30)),
            ("7:05", time(7, 5)),
            ("23:59:30", time(23, 59, 30)),
            ("24:00", None),
            ("12:60", None),
            ("noon", None),
            ("", None),
        ],
    )
    def test_parse_time(self, value: str, expected: time | None) -> None:
        """HH:MM times parse; out-of-range or malformed ones do not."""
        assert dt_parse_time(value) == expected


# =============================================================================
# Durations
# =============================================================================


class TestDurations:
    """Test dt_parse_duration() / dt_format_duration()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30", timedelta(minutes=30)),
            ("30m", timedelta(minutes=30)),
            ("1d", timedelta(days=1)),
            ("6h", timedelta(hours=6)),
            ("1d 6h 30m", timedelta(days=1, hours=6, minutes=30)),
            ("0", timedelta(0)),
        ],
    )
    def test_parse(self, value: str, expected: timedelta) -> None:
        """Compound and unit-less durations parse."""
        assert dt_parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", None, "abc", "1x"])
    def test_parse_invalid(self, value: str | None) -> None:
        """Empty or malformed durations return None."""
        assert dt_parse_duration(value) is None

    def test_default_unit(self) -> None:
        """Unit-less numbers use the requested default unit."""
        assert dt_parse_duration("2", default_unit=TIME_UNIT_HOURS) == timedelta(hours=2)
        assert dt_parse_duration("2", default_unit=TIME_UNIT_DAYS) == timedelta(days=2)
        assert dt_parse_duration("2 30m", default_unit=TIME_UNIT_HOURS) == timedelta(
            hours=2, minutes=30
        )

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (timedelta(days=1, hours=6), "1d 6h"),
            (timedelta(minutes=30), "30m"),
            (timedelta(days=1, minutes=5), "1d 5m"),
            (timedelta(0), "0"),
            (None, "0"),
        ],
    )
    def test_format(self, value: timedelta | None, expected: str) -> None:
        """Durations format to the compact form."""
        assert dt_format_duration(value) == expected


# =============================================================================
# Display
# =============================================================================


class TestFormatDue:
    """Test dt_format_due()."""

    @pytest.mark.parametrize(
        ("due", "expected"),
        [
            (make_utc_dt(2026, 3, 9, 9), "Yesterday at 09:00"),
            (make_utc_dt(2026, 3, 10, 9), "Today at 09:00"),
            (make_utc_dt(2026, 3, 11, 9), "Tomorrow at 09:00"),
            (make_utc_dt(2026, 3, 12, 9), "Overmorrow at 09:00"),
            (make_utc_dt(2026, 3, 13, 9), "Friday, March 13 at 09:00"),
            (make_utc_dt(2026, 3, 1, 18, 45), "Sunday, March 1 at 18:45"),
        ],
    )
    def test_relative_labels(
        self, due: datetime, expected: str, now: datetime, utc_tz: ZoneInfo
    ) -> None:
        """Nearby days get a label, others a full date."""
        assert dt_format_due(due, now, utc_tz) == expected

    def test_uses_local_dates(self, new_york_tz: ZoneInfo) -> None:
        """02:00 UTC tomorrow is still 22:00 today in New York."""
        now = make_utc_dt(2026, 3, 10, 16)
        due = make_utc_dt(2026, 3, 11, 2)
        assert dt_format_due(due, now, new_york_tz) == "Today at 22:00"


class TestCalendarArithmetic:
    """Test days_in_month()."""

    @pytest.mark.parametrize(
        ("year", "month", "expected"),
        [(2026, 2, 28), (2028, 2, 29), (2026, 4, 30), (2026, 12, 31)],
    )
    def test_days_in_month(self, year: int, month: int, expected: int) -> None:
        """Month lengths are leap-year aware."""
        assert days_in_month(year, month) == expected
