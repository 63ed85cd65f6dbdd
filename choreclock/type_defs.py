"""Type definitions for choreclock records.

Records are the plain dicts exchanged with storage and forms. The engines
never see them: data_builders converts records to the frozen dataclasses in
models.py and back.

TypedDict is STATIC ANALYSIS ONLY. Missing keys, wrong types and malformed
strings are handled at runtime by data_builders (`.get()` defaults plus
EntityValidationError), not by these definitions.

IMPORTANT: This file must NOT import from engines or builders to avoid
circular dependencies. Only import from typing.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ChoreId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
WallTime = str  # "HH:MM"
DayRangeText = str  # "1, 4-7, 15-17"


# =============================================================================
# Schedule Records
# =============================================================================


class ScheduleRecord(TypedDict, total=False):
    """Type definition for a stored or submitted schedule.

    All parameter sets are kept side by side; `kind` picks the active one.
    `time`, `weekdays` and `days_of_month` are shared by every variant that
    has them unless a per-variant override (e.g. `monthwise_time`,
    `certain_months_days`) is present.
    """

    kind: str
    time: WallTime
    n_days: int
    n_days_time: WallTime
    n_weeks: int
    n_weeks_time: WallTime
    n_weeks_weekdays: list[str]
    weekdays: list[str]  # ["monday", "friday"] or ["mon", "fri"]
    days_of_month: list[int] | DayRangeText
    monthwise_days: list[int] | DayRangeText
    monthwise_time: WallTime
    weeks: list[int]  # 1-5
    weeks_of_month_time: WallTime
    weeks_of_month_weekdays: list[str]
    months: list[int]  # 1-12
    certain_months_days: list[int] | DayRangeText
    certain_months_time: WallTime
    once_at: ISODatetime


# =============================================================================
# Chore Records
# =============================================================================


class CompletionRecord(TypedDict):
    """Type definition for a stored completion."""

    id: int
    completed_at: ISODatetime


class ChoreRecord(TypedDict):
    """Type definition for a stored or submitted chore.

    Only `name` is required when creating; everything else falls back to the
    existing chore and then to defaults.
    """

    name: str
    id: NotRequired[ChoreId]
    details: NotRequired[str]
    schedule: NotRequired[ScheduleRecord]
    alerting_time: NotRequired[int | str]  # minutes, or "1d 6h"
    completeable: NotRequired[bool]
    created_at: NotRequired[ISODatetime | None]
    deleted_at: NotRequired[ISODatetime | None]
    completions: NotRequired[list[CompletionRecord]]


# =============================================================================
# Configuration
# =============================================================================


class ConfigOptions(TypedDict, total=False):
    """Explicit configuration options (override environment variables)."""

    time_zone: str
    touch_mode: bool | str


# =============================================================================
# Seed Files
# =============================================================================


class SeedRecord(TypedDict):
    """Type definition for one entry of a seed file.

    Flat: schedule fields sit next to the chore fields, and weekdays are
    given as `days`.
    """

    name: str
    details: NotRequired[str]
    schedule_type: NotRequired[str]
    n_days: NotRequired[int]
    n_weeks: NotRequired[int]
    time: NotRequired[WallTime]
    days: NotRequired[list[str]]  # weekday names
    days_of_month: NotRequired[list[int] | DayRangeText]
    weeks: NotRequired[list[int]]
    months: NotRequired[list[int]]
    once_at: NotRequired[ISODatetime]
    alerting_time: NotRequired[int | str]
    completeable: NotRequired[bool]
