# File: const.py
"""Constants for choreclock.

This file centralizes record keys, defaults, schedule kinds, chore statuses,
search horizons and error messages for consistency across the package.
"""

from datetime import UTC, datetime, time, timedelta
import logging

# ------------------------------------------------------------------------------------------------
# General / Package Information
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_TIME_ZONE = "time_zone"
CONF_TOUCH_MODE = "touch_mode"

# Environment variables consulted when an option is not given explicitly
ENV_TIME_ZONE = "TZ"
ENV_TOUCH_MODE = "TOUCH"

DEFAULT_TIME_ZONE_NAME = "UTC"
DEFAULT_TOUCH_MODE = False

# ------------------------------------------------------------------------------------------------
# Schedule Kinds
# ------------------------------------------------------------------------------------------------
SCHEDULE_KIND_N_DAYS = "n_days"
SCHEDULE_KIND_N_WEEKS = "n_weeks"
SCHEDULE_KIND_MONTHWISE = "monthwise"
SCHEDULE_KIND_WEEKS_OF_MONTH = "weeks_of_month"
SCHEDULE_KIND_CERTAIN_MONTHS = "certain_months"
SCHEDULE_KIND_ONCE = "once"

SCHEDULE_KIND_OPTIONS = [
    SCHEDULE_KIND_N_DAYS,
    SCHEDULE_KIND_N_WEEKS,
    SCHEDULE_KIND_MONTHWISE,
    SCHEDULE_KIND_WEEKS_OF_MONTH,
    SCHEDULE_KIND_CERTAIN_MONTHS,
    SCHEDULE_KIND_ONCE,
]

# ------------------------------------------------------------------------------------------------
# Weekdays (Python numbering: Monday == 0)
# ------------------------------------------------------------------------------------------------
WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

WEEKDAY_OPTIONS = {
    "mon": 0,
    "tue": 1,
    "wed": 2,
    "thu": 3,
    "fri": 4,
    "sat": 5,
    "sun": 6,
}

# ------------------------------------------------------------------------------------------------
# Calendar Bounds
# ------------------------------------------------------------------------------------------------
MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31
MIN_WEEK_OF_MONTH = 1
MAX_WEEK_OF_MONTH = 5
MIN_MONTH = 1
MAX_MONTH = 12
DAYS_PER_WEEK = 7

# ------------------------------------------------------------------------------------------------
# Search Horizons (days)
# ------------------------------------------------------------------------------------------------
# One horizon per variant, shared by the backward and forward searches.
# EveryNDays and EveryNWeeks derive theirs from their own interval.
SEARCH_HORIZON_MONTHWISE = 62
SEARCH_HORIZON_WEEKS_OF_MONTH = 366
SEARCH_HORIZON_CERTAIN_MONTHS = 1461
SEARCH_HORIZON_ONCE = 0

# Returned by next_due() when no occurrence exists inside the horizon
DISTANT_FUTURE = datetime(9999, 1, 1, tzinfo=UTC)

# ------------------------------------------------------------------------------------------------
# Schedule / Chore Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_DUE_TIME = time(9, 0)
DEFAULT_N_DAYS = 1
DEFAULT_N_WEEKS = 1
DEFAULT_WEEKDAYS = [0]
DEFAULT_DAYS_OF_MONTH = [1]
DEFAULT_WEEKS_OF_MONTH = [1]
DEFAULT_MONTHS = [1]
DEFAULT_ALERTING_MINUTES = 1440
DEFAULT_ALERTING_TIME = timedelta(minutes=DEFAULT_ALERTING_MINUTES)
DEFAULT_COMPLETEABLE = True

# How long a non-completeable event stays in the "recently occurred" bucket,
# and how long a passed one-off stays due before it becomes "past"
RECENTLY_OCCURRED_WINDOW = timedelta(days=1)

# ------------------------------------------------------------------------------------------------
# Record Keys (storage / form layer)
# ------------------------------------------------------------------------------------------------
DATA_SCHEDULE_KIND = "kind"
DATA_SCHEDULE_N_DAYS = "n_days"
DATA_SCHEDULE_N_WEEKS = "n_weeks"
DATA_SCHEDULE_TIME = "time"
DATA_SCHEDULE_WEEKDAYS = "weekdays"
DATA_SCHEDULE_DAYS_OF_MONTH = "days_of_month"
DATA_SCHEDULE_WEEKS = "weeks"
DATA_SCHEDULE_MONTHS = "months"
DATA_SCHEDULE_ONCE_AT = "once_at"

# Per-variant overrides of the shared time field
DATA_SCHEDULE_N_DAYS_TIME = "n_days_time"
DATA_SCHEDULE_N_WEEKS_TIME = "n_weeks_time"
DATA_SCHEDULE_MONTHWISE_TIME = "monthwise_time"
DATA_SCHEDULE_WEEKS_OF_MONTH_TIME = "weeks_of_month_time"
DATA_SCHEDULE_CERTAIN_MONTHS_TIME = "certain_months_time"

# Per-variant overrides of the shared weekdays / days_of_month fields
DATA_SCHEDULE_N_WEEKS_WEEKDAYS = "n_weeks_weekdays"
DATA_SCHEDULE_WEEKS_OF_MONTH_WEEKDAYS = "weeks_of_month_weekdays"
DATA_SCHEDULE_MONTHWISE_DAYS = "monthwise_days"
DATA_SCHEDULE_CERTAIN_MONTHS_DAYS = "certain_months_days"

DATA_CHORE_ID = "id"
DATA_CHORE_NAME = "name"
DATA_CHORE_DETAILS = "details"
DATA_CHORE_SCHEDULE = "schedule"
DATA_CHORE_ALERTING_TIME = "alerting_time"
DATA_CHORE_COMPLETEABLE = "completeable"
DATA_CHORE_CREATED_AT = "created_at"
DATA_CHORE_DELETED_AT = "deleted_at"
DATA_CHORE_COMPLETIONS = "completions"

DATA_COMPLETION_ID = "id"
DATA_COMPLETION_COMPLETED_AT = "completed_at"

# ------------------------------------------------------------------------------------------------
# Seed Files
# ------------------------------------------------------------------------------------------------
SEED_CHORES = "chores"
SEED_SCHEDULE_TYPE = "schedule_type"
SEED_DAYS = "days"

# Seed keys copied unchanged into the chore record
SEED_CHORE_KEYS = [
    DATA_CHORE_NAME,
    DATA_CHORE_DETAILS,
    DATA_CHORE_ALERTING_TIME,
    DATA_CHORE_COMPLETEABLE,
]

# Seed keys copied unchanged into the schedule record
SEED_SCHEDULE_KEYS = [
    DATA_SCHEDULE_N_DAYS,
    DATA_SCHEDULE_N_WEEKS,
    DATA_SCHEDULE_TIME,
    DATA_SCHEDULE_DAYS_OF_MONTH,
    DATA_SCHEDULE_WEEKS,
    DATA_SCHEDULE_MONTHS,
    DATA_SCHEDULE_ONCE_AT,
]

# ------------------------------------------------------------------------------------------------
# Chore Statuses
# ------------------------------------------------------------------------------------------------
CHORE_STATUS_INACTIVE = "inactive"
CHORE_STATUS_COMPLETED = "completed"
CHORE_STATUS_DUE = "due"
CHORE_STATUS_ALERTING = "alerting"
CHORE_STATUS_UPCOMING = "upcoming"
CHORE_STATUS_RECENTLY_OCCURRED = "recently_occurred"
CHORE_STATUS_RECURRING_EVENT = "recurring_event"
CHORE_STATUS_PAST = "past"

CHORE_STATUS_ORDER = [
    CHORE_STATUS_DUE,
    CHORE_STATUS_ALERTING,
    CHORE_STATUS_UPCOMING,
    CHORE_STATUS_COMPLETED,
    CHORE_STATUS_RECENTLY_OCCURRED,
    CHORE_STATUS_RECURRING_EVENT,
    CHORE_STATUS_PAST,
    CHORE_STATUS_INACTIVE,
]

# Chore list sort orders
SORT_BY_NAME = "name"
SORT_BY_DUE = "due"
DEFAULT_SORT = SORT_BY_NAME

# ------------------------------------------------------------------------------------------------
# Display
# ------------------------------------------------------------------------------------------------
DISPLAY_TIME_FORMAT = "%H:%M"
DISPLAY_DAY_FORMAT = "%A, %B {day} at %H:%M"
CALENDAR_WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
ERROR_DAY_RANGE_EMPTY = "enter at least one day"
ERROR_DAY_RANGE_NOT_A_NUMBER = "'{token}' is not a number"
ERROR_DAY_RANGE_OUT_OF_RANGE = "day {value} is out of range ({low}-{high})"
ERROR_DAY_RANGE_REVERSED = "invalid range '{token}': start must be <= end"

ERROR_CHORE_NAME_REQUIRED = "chore name is required"
ERROR_INVALID_SCHEDULE_KIND = "unknown schedule kind '{kind}'"
ERROR_INVALID_TIME = "invalid time '{value}', expected HH:MM"
ERROR_INVALID_DATETIME = "invalid date/time '{value}'"
ERROR_INVALID_ALERTING_TIME = "invalid alerting time '{value}'"
ERROR_INVALID_COMPLETEABLE = "invalid completeable flag '{value}', expected true or false"
ERROR_INVALID_WEEKDAY = "unknown weekday '{value}'"
ERROR_DUPLICATE_CHORE_NAME = "a chore named '{name}' already exists"
ERROR_CHORE_NOT_FOUND = "chore '{chore_id}' not found"
ERROR_COMPLETION_NOT_FOUND = "completion {completion_id} not found"
ERROR_SEED_FILE_NOT_FOUND = "seed file not found: {path}"
