# File: __init__.py
"""choreclock - due-date engine for recurring household chores.

Key Features:
- Six schedule kinds (every N days/weeks, days of the month, weeks of the
  month, certain months, once) evaluated in an explicit time zone.
- Status derivation (due, alerting, completed, ...) from a chore's schedule
  and completion history.
- Record builders, an in-memory store, YAML seed files and month calendar
  data for callers that render the results.
"""

from __future__ import annotations

from .config import EngineConfig
from .data_builders import EntityValidationError, build_chore, build_schedule
from .engines import ChoreEngine, schedule_engine
from .models import (
    CertainMonths,
    Chore,
    Completion,
    EveryNDays,
    EveryNWeeks,
    MonthwiseDays,
    Once,
    Schedule,
    WeekdaySet,
    WeeksOfMonthDays,
)
from .seed import load_seed, load_seed_file
from .store import MemoryChoreStore
from .utils.day_range import DayRangeError, format_day_range, parse_day_range

__all__ = [
    "CertainMonths",
    "Chore",
    "ChoreEngine",
    "Completion",
    "DayRangeError",
    "EngineConfig",
    "EntityValidationError",
    "EveryNDays",
    "EveryNWeeks",
    "MemoryChoreStore",
    "MonthwiseDays",
    "Once",
    "Schedule",
    "WeekdaySet",
    "WeeksOfMonthDays",
    "build_chore",
    "build_schedule",
    "format_day_range",
    "load_seed",
    "load_seed_file",
    "parse_day_range",
    "schedule_engine",
]
