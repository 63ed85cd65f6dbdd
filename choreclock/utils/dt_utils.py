# File: utils/dt_utils.py
"""Date and time utilities for choreclock.

Pure functions over datetime, zoneinfo and dateutil. None of them read a
process-wide time zone: the zone is always passed in by the caller (usually
EngineConfig.time_zone).

Functions:
    - dt_now_utc: Current datetime in UTC
    - dt_now_local: Current datetime in a given zone
    - dt_today_local: Today's date in a given zone
    - as_utc / as_local: Zone conversion for aware datetimes
    - dt_localize: Wall-clock date + time in a zone to an aware UTC instant
    - dt_parse_date: Parse date strings
    - dt_parse: Normalize str/date/datetime input to an aware datetime
    - dt_parse_time / dt_format_time: "HH:MM" wall-clock times
    - dt_parse_duration / dt_format_duration: "1d 6h 30m" durations
    - dt_format_due: Human-readable due string ("Today at 09:00")
    - days_in_month: Calendar arithmetic
"""

from __future__ import annotations

from calendar import monthrange
from datetime import UTC, date, datetime, time, timedelta, tzinfo
import logging
import re

from dateutil import parser as dt_parser

from .. import const

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# Time unit constants
TIME_UNIT_MINUTES = "minutes"
TIME_UNIT_HOURS = "hours"
TIME_UNIT_DAYS = "days"

_DURATION_PATTERN = re.compile(r"(\d+)\s*([dhm])?")
_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_local(tz: tzinfo) -> datetime:
    """Return the current datetime in the given zone (timezone-aware)."""
    return datetime.now(tz)


def dt_today_local(tz: tzinfo) -> date:
    """Return today's date in the given zone."""
    return dt_now_local(tz).date()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: tzinfo) -> datetime:
    """Convert a datetime to the given zone.

    Naive datetimes are assumed to be UTC.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz)


def dt_localize(day: date, at: time, tz: tzinfo) -> datetime:
    """Combine a local calendar date and wall-clock time into a UTC instant.

    DST handling is deterministic and never raises:
    - Ambiguous times (clocks fall back, the hour repeats) resolve to the
      first, earlier instant.
    - Non-existent times (clocks spring forward) are read with the offset in
      force before the transition, which moves them forward by the gap:
      02:30 on a spring-forward night in New York becomes 03:30 EDT.

    Both rules are what PEP 495 specifies for fold=0.

    Args:
        day: Calendar date in `tz`
        at: Wall-clock time (any tzinfo on it is ignored)
        tz: Zone the date and time are expressed in

    Returns:
        Aware datetime in UTC.
    """
    naive = datetime.combine(day, at.replace(tzinfo=None))
    return naive.replace(tzinfo=tz, fold=0).astimezone(UTC)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "04/07/2025" (US format)
    - "07/04/2025" (European format - attempted if US fails)

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def dt_parse(
    dt_input: str | date | datetime | None,
    default_tzinfo: tzinfo = UTC,
) -> datetime | None:
    """Normalize various datetime inputs to an aware datetime.

    Strings are tried as ISO 8601 first, then as plain dates, then with
    dateutil's parser ("Jan 5 2026 14:30"). Naive results get
    `default_tzinfo`, the same way dt_localize resolves them.

    Args:
        dt_input: String, date or datetime to normalize, or None
        default_tzinfo: Zone for naive input (default: UTC)

    Returns:
        Aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15T08:00", ZoneInfo("Europe/Berlin"))
        datetime.datetime(2025, 4, 15, 8, 0, tzinfo=ZoneInfo('Europe/Berlin'))
    """
    if not dt_input:
        return None

    result: datetime | None = None

    if isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input)
        except ValueError:
            parsed_date = dt_parse_date(dt_input)
            if parsed_date:
                result = datetime.combine(parsed_date, datetime.min.time())
            else:
                try:
                    result = dt_parser.parse(dt_input)
                except (ValueError, OverflowError):
                    _LOGGER.debug("Unparseable datetime string: %s", dt_input)
                    return None

    elif isinstance(dt_input, datetime):
        result = dt_input

    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())

    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=default_tzinfo)

    return result


def dt_parse_time(time_str: str | time | None) -> time | None:
    """Parse an "HH:MM" (or "HH:MM:SS") wall-clock time.

    Returns:
        datetime.time, or None for empty or malformed input.

    Examples:
        dt_parse_time("09:30") → time(9, 30)
        dt_parse_time("24:00") → None
    """
    if isinstance(time_str, time):
        return time_str
    if not time_str or not isinstance(time_str, str):
        return None

    match = _TIME_PATTERN.match(time_str)
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        _LOGGER.debug("Time out of range: %s", time_str)
        return None
    return time(hour, minute, second)


def dt_format_time(value: time) -> str:
    """Format a wall-clock time as "HH:MM"."""
    return value.strftime(const.DISPLAY_TIME_FORMAT)


# ==============================================================================
# Duration Parsing and Formatting
# ==============================================================================


def dt_parse_duration(
    duration_str: str | None,
    default_unit: str = TIME_UNIT_MINUTES,
) -> timedelta | None:
    """Parse a human-readable duration string into a timedelta.

    Supported formats:
    - "30" or "30m" → 30 minutes (default unit)
    - "1d" → 1 day
    - "6h" → 6 hours
    - "1d 6h 30m" → compound duration (1 day, 6 hours, 30 minutes)
    - "0" → timedelta(0)
    - "" or None → None

    Args:
        duration_str: Human-readable duration string (e.g., "1d 6h 30m")
        default_unit: Unit to assume if no suffix provided (default: minutes).

    Returns:
        timedelta for valid durations, None for empty or invalid input.
    """
    if duration_str is None:
        return None

    cleaned = duration_str.strip().lower()
    if not cleaned:
        return None

    matches = _DURATION_PATTERN.findall(cleaned)
    # Reject leftovers like "1x" or "abc"
    if not matches or _DURATION_PATTERN.sub("", cleaned).strip():
        _LOGGER.warning(
            "Invalid duration format: %s - expected format like '30', '1d', '2h 30m'",
            duration_str,
        )
        return None

    total = timedelta()
    for value_str, unit in matches:
        num = int(value_str)
        if unit == "d":
            total += timedelta(days=num)
        elif unit == "h":
            total += timedelta(hours=num)
        elif unit == "m":
            total += timedelta(minutes=num)
        elif default_unit == TIME_UNIT_DAYS:
            total += timedelta(days=num)
        elif default_unit == TIME_UNIT_HOURS:
            total += timedelta(hours=num)
        else:
            total += timedelta(minutes=num)

    return total


def dt_format_duration(td: timedelta | None) -> str:
    """Format a timedelta into a human-readable duration string.

    Examples:
        dt_format_duration(timedelta(days=1, hours=6)) → "1d 6h"
        dt_format_duration(timedelta(minutes=30)) → "30m"
        dt_format_duration(None) → "0"
    """
    if td is None or td <= timedelta():
        return "0"

    total_seconds = int(td.total_seconds())
    days, remainder = divmod(total_seconds, 86400)  # 24 * 60 * 60
    hours, remainder = divmod(remainder, 3600)  # 60 * 60
    minutes = remainder // 60

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    return " ".join(parts) if parts else "0"


# ==============================================================================
# Display
# ==============================================================================


def dt_format_due(due: datetime, now: datetime, tz: tzinfo) -> str:
    """Format a due instant relative to the local date of `now`.

    Returns:
        "Yesterday at 09:00", "Today at 09:00", "Tomorrow at 09:00",
        "Overmorrow at 09:00", or "Friday, March 6 at 09:00" otherwise.
    """
    local_due = as_local(due, tz)
    today = as_local(now, tz).date()
    time_str = local_due.strftime(const.DISPLAY_TIME_FORMAT)

    relative_days = {
        -1: "Yesterday",
        0: "Today",
        1: "Tomorrow",
        2: "Overmorrow",
    }
    label = relative_days.get((local_due.date() - today).days)
    if label:
        return f"{label} at {time_str}"

    # %-d is not portable, so the day number is substituted separately
    return local_due.strftime(const.DISPLAY_DAY_FORMAT.format(day=local_due.day))


# ==============================================================================
# Calendar Arithmetic
# ==============================================================================


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month (leap-year aware)."""
    return monthrange(year, month)[1]
