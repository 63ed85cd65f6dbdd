# File: utils/day_range.py
"""Day-range notation for day-of-month style schedules.

Parses and formats the compact "1, 4-7, 15-17" notation used by the
monthwise and certain-months schedule editors.

Functions:
    - parse_day_range: Text to a sorted, deduplicated list of days
    - format_day_range: Days to the shortest equivalent text
    - validate_day_range: Parse without raising, for form error collection
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

import voluptuous as vol

from .. import const

_LOGGER = logging.getLogger(__name__)

RANGE_SEPARATOR = "-"
TOKEN_SEPARATOR = ","
FORMAT_JOINER = ", "


class DayRangeError(vol.Invalid):
    """Raised when day-range text cannot be parsed.

    Subclasses voluptuous.Invalid so parse_day_range can be used directly as
    a schema validator without losing the message.

    Attributes:
        raw: The text the user entered, for redisplay next to the message
        token: The offending token, or None for empty input
    """

    def __init__(self, message: str, raw: str, token: str | None = None) -> None:
        """Initialize DayRangeError."""
        super().__init__(message)
        self.raw = raw
        self.token = token


def _parse_int(value_str: str, token: str, raw: str) -> int:
    # ASCII digits only: no sign, no underscores
    if not (value_str.isascii() and value_str.isdigit()):
        raise DayRangeError(
            const.ERROR_DAY_RANGE_NOT_A_NUMBER.format(token=value_str or token),
            raw,
            token,
        )
    value = int(value_str)
    if not const.MIN_DAY_OF_MONTH <= value <= const.MAX_DAY_OF_MONTH:
        raise DayRangeError(
            const.ERROR_DAY_RANGE_OUT_OF_RANGE.format(
                value=value,
                low=const.MIN_DAY_OF_MONTH,
                high=const.MAX_DAY_OF_MONTH,
            ),
            raw,
            token,
        )
    return value


def parse_day_range(text: str | None) -> list[int]:
    """Parse day-range text into a sorted list of unique days.

    Grammar: comma-separated tokens, each a single integer or "a-b" with
    a <= b. Whitespace around tokens and around "-" is ignored and empty
    tokens (a trailing comma, "1,,2") are skipped.

    Args:
        text: Raw user input, e.g. "1, 4-7, 15-17"

    Returns:
        Days in ascending order without duplicates.

    Raises:
        DayRangeError: Empty input, a non-numeric token, a value outside
            1-31, or a reversed range.

    Examples:
        parse_day_range("1, 4-7") → [1, 4, 5, 6, 7]
        parse_day_range("5-7, 6, 1,") → [1, 5, 6, 7]
    """
    raw = text or ""
    if not raw.strip():
        raise DayRangeError(const.ERROR_DAY_RANGE_EMPTY, raw)

    days: set[int] = set()
    for part in raw.split(TOKEN_SEPARATOR):
        token = part.strip()
        if not token:
            continue

        if RANGE_SEPARATOR in token:
            start_str, _, end_str = token.partition(RANGE_SEPARATOR)
            start = _parse_int(start_str.strip(), token, raw)
            end = _parse_int(end_str.strip(), token, raw)
            if start > end:
                raise DayRangeError(
                    const.ERROR_DAY_RANGE_REVERSED.format(token=token), raw, token
                )
            days.update(range(start, end + 1))
        else:
            days.add(_parse_int(token, token, raw))

    # Input like " , ," has no tokens at all
    if not days:
        raise DayRangeError(const.ERROR_DAY_RANGE_EMPTY, raw)

    return sorted(days)


def format_day_range(days: Iterable[int]) -> str:
    """Format days as the shortest day-range text.

    Maximal runs of consecutive days collapse to "start-end"; single days
    stay as they are. Runs are joined with ", ".

    Examples:
        format_day_range([1, 2, 3, 4, 5]) → "1-5"
        format_day_range([1, 4, 5, 6, 7, 10]) → "1, 4-7, 10"
        format_day_range([]) → ""
    """
    ordered = sorted(set(days))
    if not ordered:
        return ""

    runs: list[tuple[int, int]] = []
    start = prev = ordered[0]
    for day in ordered[1:]:
        if day == prev + 1:
            prev = day
            continue
        runs.append((start, prev))
        start = prev = day
    runs.append((start, prev))

    return FORMAT_JOINER.join(
        str(first) if first == last else f"{first}{RANGE_SEPARATOR}{last}"
        for first, last in runs
    )


def validate_day_range(text: str | None) -> tuple[list[int] | None, str | None]:
    """Validate day-range text for form input.

    Returns:
        Tuple of (days, error_message).
        If valid, returns (days, None).
        If invalid, returns (None, error_message).
    """
    try:
        return parse_day_range(text), None
    except DayRangeError as err:
        _LOGGER.debug("Rejected day range %r: %s", err.raw, err.msg)
        return None, err.msg
