"""Record builders and validation for schedules and chores.

This module is the SINGLE SOURCE OF TRUTH for:
- Record field defaults
- Record validation (voluptuous schema + day-range parsing)
- Building the frozen models from storage/form records
- Serialising models back into records

### Build Functions
`build_schedule()` and `build_chore()` take a record (plain dict with DATA_*
keys) and an optional existing model:
- Missing fields fall back to the existing model, then to const.DEFAULT_*
- Invalid fields raise EntityValidationError naming the offending field

### Validation Functions
`validate_schedule_data()` and `validate_chore_data()`:
- Take a record with DATA_* keys
- Return a dict of {field: message} (empty if valid)
- Never raise, so a form can show every error at once

See Also:
- type_defs.py: TypedDict definitions for the records
- utils/day_range.py: "1, 4-7" notation for days of the month
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, time, timedelta, tzinfo
from typing import TYPE_CHECKING, Any
import uuid

import voluptuous as vol

from . import const
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
from .utils.day_range import format_day_range, parse_day_range
from .utils.dt_utils import (
    dt_format_time,
    dt_parse,
    dt_parse_duration,
    dt_parse_time,
)

if TYPE_CHECKING:
    from .type_defs import ChoreRecord, CompletionRecord, ScheduleRecord

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information for form highlighting.

    Raised by the build functions when a record cannot be turned into a
    model. The field attribute lets a form map the error back to the input
    that caused it.

    Attributes:
        field: The DATA_* key of the field that failed
        message: Human-readable message (placeholders already applied)
        placeholders: Values substituted into the message template

    Example:
        raise EntityValidationError(
            field=const.DATA_SCHEDULE_TIME,
            message=const.ERROR_INVALID_TIME,
            placeholders={"value": "25:00"},
        )
    """

    def __init__(
        self,
        field: str,
        message: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize EntityValidationError.

        Args:
            field: The DATA_* key of the field that failed validation
            message: Message, or a template for `placeholders`
            placeholders: Optional dict of template values
        """
        self.field = field
        self.placeholders = placeholders or {}
        self.message = message.format(**self.placeholders) if placeholders else message
        super().__init__(self.message)


# ==============================================================================
# FIELD VALIDATORS (usable directly in voluptuous schemas)
# ==============================================================================


def _normalize_list_field(value: Any) -> list[Any]:
    """Normalize a field that should be a list.

    Handles cases where the value might be:
    - Already a list or tuple → return as list
    - None → return empty list
    - A single scalar → wrap in a list

    This prevents bugs like list("monday") → ['m', 'o', 'n', ...]
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _time_validator(value: Any) -> time:
    """Validate an "HH:MM" wall-clock time."""
    parsed = dt_parse_time(value)
    if parsed is None:
        raise vol.Invalid(const.ERROR_INVALID_TIME.format(value=value))
    return parsed


def _weekday_validator(value: Any) -> int:
    """Validate one weekday given as a name, abbreviation or number (Monday == 0).

    Examples:
        "Monday" → 0, "fri" → 4, 6 → 6
    """
    if isinstance(value, bool):
        raise vol.Invalid(const.ERROR_INVALID_WEEKDAY.format(value=value))
    if isinstance(value, int):
        if 0 <= value < const.DAYS_PER_WEEK:
            return value
        raise vol.Invalid(const.ERROR_INVALID_WEEKDAY.format(value=value))

    name = str(value).strip().lower()
    if name in const.WEEKDAY_NAMES:
        return const.WEEKDAY_NAMES.index(name)
    if name in const.WEEKDAY_OPTIONS:
        return const.WEEKDAY_OPTIONS[name]
    raise vol.Invalid(const.ERROR_INVALID_WEEKDAY.format(value=value))


def _weekdays_validator(value: Any) -> list[int]:
    """Validate a list of weekdays, returning sorted unique numbers."""
    return sorted({_weekday_validator(item) for item in _normalize_list_field(value)})


def _days_of_month_validator(value: Any) -> list[int]:
    """Validate days of the month given as day-range text or a list of ints."""
    if value is None or isinstance(value, str):
        return parse_day_range(value)

    days: set[int] = set()
    for item in _normalize_list_field(value):
        text = str(item).strip()
        if isinstance(item, bool) or not (text.isascii() and text.isdigit()):
            raise vol.Invalid(const.ERROR_DAY_RANGE_NOT_A_NUMBER.format(token=item))
        day = int(text)
        if not const.MIN_DAY_OF_MONTH <= day <= const.MAX_DAY_OF_MONTH:
            raise vol.Invalid(
                const.ERROR_DAY_RANGE_OUT_OF_RANGE.format(
                    value=day,
                    low=const.MIN_DAY_OF_MONTH,
                    high=const.MAX_DAY_OF_MONTH,
                )
            )
        days.add(day)
    if not days:
        raise vol.Invalid(const.ERROR_DAY_RANGE_EMPTY)
    return sorted(days)


def _bounded_int_list(low: int, high: int) -> vol.All:
    """Build a validator for a non-empty list of ints within [low, high]."""
    return vol.All(
        _normalize_list_field,
        [vol.All(vol.Coerce(int), vol.Range(min=low, max=high))],
        vol.Length(min=1),
    )


def _datetime_validator(value: Any) -> datetime:
    """Validate an ISO (or otherwise parseable) date/time."""
    parsed = dt_parse(value)
    if parsed is None:
        raise vol.Invalid(const.ERROR_INVALID_DATETIME.format(value=value))
    return parsed


def _alerting_time_validator(value: Any) -> timedelta:
    """Validate an alerting time given as minutes or a duration string.

    Examples:
        1440 → timedelta(days=1)
        "1d 6h" → timedelta(days=1, hours=6)
    """
    if isinstance(value, timedelta):
        parsed: timedelta | None = value
    elif isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = timedelta(minutes=value)
    else:
        parsed = dt_parse_duration(str(value))

    if parsed is None or parsed < timedelta():
        raise vol.Invalid(const.ERROR_INVALID_ALERTING_TIME.format(value=value))
    return parsed


def _completeable_validator(value: Any) -> bool:
    """Validate the completeable flag, accepting form strings like "false"."""
    try:
        return vol.Boolean()(value)
    except vol.Invalid as err:
        raise vol.Invalid(
            const.ERROR_INVALID_COMPLETEABLE.format(value=value)
        ) from err


_POSITIVE_INT = vol.All(vol.Coerce(int), vol.Range(min=1))

SCHEDULE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.DATA_SCHEDULE_KIND): vol.In(const.SCHEDULE_KIND_OPTIONS),
        vol.Optional(const.DATA_SCHEDULE_TIME): _time_validator,
        vol.Optional(const.DATA_SCHEDULE_N_DAYS): _POSITIVE_INT,
        vol.Optional(const.DATA_SCHEDULE_N_DAYS_TIME): _time_validator,
        vol.Optional(const.DATA_SCHEDULE_N_WEEKS): _POSITIVE_INT,
        vol.Optional(const.DATA_SCHEDULE_N_WEEKS_TIME): _time_validator,
        vol.Optional(const.DATA_SCHEDULE_N_WEEKS_WEEKDAYS): _weekdays_validator,
        vol.Optional(const.DATA_SCHEDULE_WEEKDAYS): _weekdays_validator,
        vol.Optional(const.DATA_SCHEDULE_DAYS_OF_MONTH): _days_of_month_validator,
        vol.Optional(const.DATA_SCHEDULE_MONTHWISE_DAYS): _days_of_month_validator,
        vol.Optional(const.DATA_SCHEDULE_MONTHWISE_TIME): _time_validator,
        vol.Optional(const.DATA_SCHEDULE_WEEKS): _bounded_int_list(
            const.MIN_WEEK_OF_MONTH, const.MAX_WEEK_OF_MONTH
        ),
        vol.Optional(const.DATA_SCHEDULE_WEEKS_OF_MONTH_TIME): _time_validator,
        vol.Optional(const.DATA_SCHEDULE_WEEKS_OF_MONTH_WEEKDAYS): _weekdays_validator,
        vol.Optional(const.DATA_SCHEDULE_MONTHS): _bounded_int_list(
            const.MIN_MONTH, const.MAX_MONTH
        ),
        vol.Optional(const.DATA_SCHEDULE_CERTAIN_MONTHS_DAYS): _days_of_month_validator,
        vol.Optional(const.DATA_SCHEDULE_CERTAIN_MONTHS_TIME): _time_validator,
        vol.Optional(const.DATA_SCHEDULE_ONCE_AT): _datetime_validator,
    },
    extra=vol.ALLOW_EXTRA,
)


def _collect_errors(err: vol.MultipleInvalid, default_field: str) -> dict[str, str]:
    """Flatten voluptuous errors into {field: message}, first error per field."""
    errors: dict[str, str] = {}
    for error in err.errors:
        field = str(error.path[0]) if error.path else default_field
        errors.setdefault(field, error.msg)
    return errors


# ==============================================================================
# SCHEDULES
# ==============================================================================


def validate_schedule_data(record: ScheduleRecord | dict[str, Any]) -> dict[str, str]:
    """Validate a schedule record.

    Args:
        record: Schedule record with DATA_SCHEDULE_* keys (any subset)

    Returns:
        Dict of errors: {field: message}. Empty dict means validation passed.

    Examples:
        validate_schedule_data({"days_of_month": "10-5"})
        → {"days_of_month": "invalid range '10-5': start must be <= end"}
    """
    try:
        SCHEDULE_SCHEMA(dict(record))
    except vol.MultipleInvalid as err:
        errors = _collect_errors(err, const.DATA_SCHEDULE_KIND)
        const.LOGGER.debug("Schedule record rejected: %s", errors)
        return errors
    return {}


def build_schedule(
    record: ScheduleRecord | dict[str, Any],
    existing: Schedule | None = None,
    *,
    tz: tzinfo = UTC,
) -> Schedule:
    """Build a schedule for create or update operations.

    Every parameter set is rebuilt, not just the active one, so fields that
    several variants share (`time`, `weekdays`, `days_of_month`) update all
    of them. Per-variant keys (`monthwise_time`, `n_weeks_weekdays`,
    `certain_months_days`, ...) override the shared fields.

    Args:
        record: Schedule record (may have missing fields)
        existing: None for create, the current schedule for update
        tz: Zone for a naive `once_at`

    Returns:
        Complete Schedule.

    Raises:
        EntityValidationError: For the first invalid field. An unknown
            `kind` is not an error: it falls back to the existing kind.

    Examples:
        # CREATE mode - every missing field gets const.DEFAULT_*
        build_schedule({"kind": "n_days", "n_days": 3, "time": "07:30"})

        # UPDATE mode - preserves the parameters not in the record
        build_schedule({"kind": "monthwise"}, existing=old_schedule)
    """
    base = existing or Schedule()

    try:
        validated = SCHEDULE_SCHEMA(dict(record))
    except vol.MultipleInvalid as err:
        errors = _collect_errors(err, const.DATA_SCHEDULE_KIND)
        errors.pop(const.DATA_SCHEDULE_KIND, None)
        if errors:
            field, message = next(iter(errors.items()))
            raise EntityValidationError(field=field, message=message) from err
        # Only the kind was bad; validate again without it
        validated = SCHEDULE_SCHEMA(
            {k: v for k, v in record.items() if k != const.DATA_SCHEDULE_KIND}
        )

    kind = validated.get(const.DATA_SCHEDULE_KIND)
    if kind not in const.SCHEDULE_KIND_OPTIONS:
        if kind is not None or const.DATA_SCHEDULE_KIND in record:
            const.LOGGER.debug(
                "Unknown schedule kind %r, keeping %s",
                record.get(const.DATA_SCHEDULE_KIND),
                base.kind,
            )
        kind = base.kind

    shared_time: time | None = validated.get(const.DATA_SCHEDULE_TIME)

    def time_for(override_key: str, current: time) -> time:
        """Get time: per-variant override > shared time > existing."""
        if override_key in validated:
            return validated[override_key]
        if shared_time is not None:
            return shared_time
        return current

    def get_field(data_key: str, current: Any) -> Any:
        """Get field value: record > existing."""
        return validated.get(data_key, current)

    def shared_field(override_key: str, shared_key: str, current: Any) -> Any:
        """Get field value: per-variant key > shared key > existing."""
        if override_key in validated:
            return validated[override_key]
        return validated.get(shared_key, current)

    n_days = EveryNDays(
        days=get_field(const.DATA_SCHEDULE_N_DAYS, base.n_days.days),
        time=time_for(const.DATA_SCHEDULE_N_DAYS_TIME, base.n_days.time),
    )
    n_weeks = EveryNWeeks(
        weeks=get_field(const.DATA_SCHEDULE_N_WEEKS, base.n_weeks.weeks),
        weekdays=WeekdaySet.from_days(
            shared_field(
                const.DATA_SCHEDULE_N_WEEKS_WEEKDAYS,
                const.DATA_SCHEDULE_WEEKDAYS,
                base.n_weeks.weekdays.days,
            ),
            time_for(const.DATA_SCHEDULE_N_WEEKS_TIME, base.n_weeks.weekdays.time),
        ),
    )
    monthwise = MonthwiseDays(
        days=tuple(
            shared_field(
                const.DATA_SCHEDULE_MONTHWISE_DAYS,
                const.DATA_SCHEDULE_DAYS_OF_MONTH,
                base.monthwise.days,
            )
        ),
        time=time_for(const.DATA_SCHEDULE_MONTHWISE_TIME, base.monthwise.time),
    )
    weeks_of_month = WeeksOfMonthDays(
        weeks=tuple(
            sorted(set(get_field(const.DATA_SCHEDULE_WEEKS, base.weeks_of_month.weeks)))
        ),
        weekdays=WeekdaySet.from_days(
            shared_field(
                const.DATA_SCHEDULE_WEEKS_OF_MONTH_WEEKDAYS,
                const.DATA_SCHEDULE_WEEKDAYS,
                base.weeks_of_month.weekdays.days,
            ),
            time_for(
                const.DATA_SCHEDULE_WEEKS_OF_MONTH_TIME,
                base.weeks_of_month.weekdays.time,
            ),
        ),
    )
    certain_months = CertainMonths(
        months=tuple(
            sorted(set(get_field(const.DATA_SCHEDULE_MONTHS, base.certain_months.months)))
        ),
        days=tuple(
            shared_field(
                const.DATA_SCHEDULE_CERTAIN_MONTHS_DAYS,
                const.DATA_SCHEDULE_DAYS_OF_MONTH,
                base.certain_months.days,
            )
        ),
        time=time_for(const.DATA_SCHEDULE_CERTAIN_MONTHS_TIME, base.certain_months.time),
    )

    once = base.once
    if const.DATA_SCHEDULE_ONCE_AT in validated:
        # Re-read so naive input lands in the caller's zone, not UTC
        once_at = dt_parse(record[const.DATA_SCHEDULE_ONCE_AT], tz)
        once = Once(at=once_at.astimezone(UTC))

    return Schedule(
        kind=kind,
        n_days=n_days,
        n_weeks=n_weeks,
        monthwise=monthwise,
        weeks_of_month=weeks_of_month,
        certain_months=certain_months,
        once=once,
    )


def _weekday_names(weekdays: WeekdaySet) -> list[str]:
    return [const.WEEKDAY_NAMES[day] for day in weekdays.days]


def schedule_to_record(schedule: Schedule) -> ScheduleRecord:
    """Serialise a schedule into a record that build_schedule reads back.

    Shared fields (`weekdays`, `days_of_month`) carry the active variant's
    values for form callers. Per-variant keys keep every variant's own time,
    weekdays and days, so inactive variants survive a round trip.
    """
    kind = schedule.kind
    weekday_source = (
        schedule.weeks_of_month.weekdays
        if kind == const.SCHEDULE_KIND_WEEKS_OF_MONTH
        else schedule.n_weeks.weekdays
    )
    days_source = (
        schedule.certain_months.days
        if kind == const.SCHEDULE_KIND_CERTAIN_MONTHS
        else schedule.monthwise.days
    )

    record: ScheduleRecord = {
        const.DATA_SCHEDULE_KIND: kind,
        const.DATA_SCHEDULE_N_DAYS: schedule.n_days.days,
        const.DATA_SCHEDULE_N_DAYS_TIME: dt_format_time(schedule.n_days.time),
        const.DATA_SCHEDULE_N_WEEKS: schedule.n_weeks.weeks,
        const.DATA_SCHEDULE_N_WEEKS_TIME: dt_format_time(schedule.n_weeks.weekdays.time),
        const.DATA_SCHEDULE_N_WEEKS_WEEKDAYS: _weekday_names(schedule.n_weeks.weekdays),
        const.DATA_SCHEDULE_WEEKDAYS: _weekday_names(weekday_source),
        const.DATA_SCHEDULE_DAYS_OF_MONTH: format_day_range(days_source),
        const.DATA_SCHEDULE_MONTHWISE_DAYS: format_day_range(schedule.monthwise.days),
        const.DATA_SCHEDULE_MONTHWISE_TIME: dt_format_time(schedule.monthwise.time),
        const.DATA_SCHEDULE_WEEKS: list(schedule.weeks_of_month.weeks),
        const.DATA_SCHEDULE_WEEKS_OF_MONTH_TIME: dt_format_time(
            schedule.weeks_of_month.weekdays.time
        ),
        const.DATA_SCHEDULE_WEEKS_OF_MONTH_WEEKDAYS: _weekday_names(
            schedule.weeks_of_month.weekdays
        ),
        const.DATA_SCHEDULE_MONTHS: list(schedule.certain_months.months),
        const.DATA_SCHEDULE_CERTAIN_MONTHS_DAYS: format_day_range(
            schedule.certain_months.days
        ),
        const.DATA_SCHEDULE_CERTAIN_MONTHS_TIME: dt_format_time(
            schedule.certain_months.time
        ),
        const.DATA_SCHEDULE_ONCE_AT: schedule.once.at.isoformat(),
    }
    return record


# ==============================================================================
# CHORES
# ==============================================================================


def validate_chore_data(
    record: ChoreRecord | dict[str, Any],
    existing_chores: Iterable[Chore] | None = None,
    *,
    is_update: bool = False,
    current_chore_id: str | None = None,
) -> dict[str, str]:
    """Validate chore business rules.

    Args:
        record: Chore record with DATA_CHORE_* keys
        existing_chores: All existing chores for duplicate checking (optional)
        is_update: True if updating an existing chore (name may be omitted)
        current_chore_id: ID of chore being updated (excluded from duplicate check)

    Returns:
        Dict of errors: {field: message}. Schedule errors use the schedule
        record's own keys. Empty dict means validation passed.

    Validation Rules:
        1. Name not empty (create) or not blank (update if provided)
        2. Name not duplicate among live chores
        3. Alerting time is minutes or a duration string, completeable a boolean
        4. created_at / deleted_at parse as date/times
        5. Schedule record valid
    """
    errors: dict[str, str] = {}

    # === 1. Name validation ===
    name = record.get(const.DATA_CHORE_NAME, "")
    if isinstance(name, str):
        name = name.strip()

    if (not is_update or const.DATA_CHORE_NAME in record) and not name:
        errors[const.DATA_CHORE_NAME] = const.ERROR_CHORE_NAME_REQUIRED
        return errors

    # === 2. Duplicate name check ===
    if name and existing_chores:
        for chore in existing_chores:
            if chore.id == current_chore_id or chore.deleted_at is not None:
                continue
            if chore.name.strip().lower() == str(name).lower():
                errors[const.DATA_CHORE_NAME] = const.ERROR_DUPLICATE_CHORE_NAME.format(
                    name=name
                )
                return errors

    # === 3. Alerting time and completeable flag ===
    if const.DATA_CHORE_ALERTING_TIME in record:
        try:
            _alerting_time_validator(record[const.DATA_CHORE_ALERTING_TIME])
        except vol.Invalid as err:
            errors[const.DATA_CHORE_ALERTING_TIME] = err.msg

    if const.DATA_CHORE_COMPLETEABLE in record:
        try:
            _completeable_validator(record[const.DATA_CHORE_COMPLETEABLE])
        except vol.Invalid as err:
            errors[const.DATA_CHORE_COMPLETEABLE] = err.msg

    # === 4. Lifetime bounds ===
    for key in (const.DATA_CHORE_CREATED_AT, const.DATA_CHORE_DELETED_AT):
        value = record.get(key)
        if value is not None and dt_parse(value) is None:
            errors[key] = const.ERROR_INVALID_DATETIME.format(value=value)

    # === 5. Schedule ===
    schedule_record = record.get(const.DATA_CHORE_SCHEDULE)
    if schedule_record:
        errors.update(validate_schedule_data(schedule_record))

    return errors


def _parse_optional_datetime(
    record: dict[str, Any], key: str, current: datetime | None, tz: tzinfo
) -> datetime | None:
    if key not in record:
        return current
    value = record[key]
    if value is None or value == "":
        return None
    parsed = dt_parse(value, tz)
    if parsed is None:
        raise EntityValidationError(
            field=key,
            message=const.ERROR_INVALID_DATETIME,
            placeholders={"value": str(value)},
        )
    return parsed.astimezone(UTC)


def _build_completions(
    records: Iterable[CompletionRecord | dict[str, Any]], tz: tzinfo
) -> tuple[Completion, ...]:
    completions: list[Completion] = []
    for item in records:
        completed_at = dt_parse(item.get(const.DATA_COMPLETION_COMPLETED_AT), tz)
        if completed_at is None:
            raise EntityValidationError(
                field=const.DATA_CHORE_COMPLETIONS,
                message=const.ERROR_INVALID_DATETIME,
                placeholders={
                    "value": str(item.get(const.DATA_COMPLETION_COMPLETED_AT))
                },
            )
        completions.append(
            Completion(
                id=int(item.get(const.DATA_COMPLETION_ID, len(completions) + 1)),
                completed_at=completed_at.astimezone(UTC),
            )
        )
    return tuple(completions)


def build_chore(
    record: ChoreRecord | dict[str, Any],
    existing: Chore | None = None,
    *,
    tz: tzinfo = UTC,
) -> Chore:
    """Build a chore for create or update operations.

    One function handles both create (existing=None) and update
    (existing=Chore).

    Args:
        record: Chore record (may have missing fields)
        existing: None for create, the current chore for update
        tz: Zone for naive date/times in the record

    Returns:
        Complete Chore.

    Raises:
        EntityValidationError: Blank name, bad alerting time or completeable
            flag, unparseable date/times, or an invalid schedule field.

    Examples:
        # CREATE mode - generates an id, applies const.DEFAULT_* for missing fields
        chore = build_chore({"name": "Water plants"})

        # UPDATE mode - preserves existing fields not in the record
        chore = build_chore({"alerting_time": "2h"}, existing=old_chore)
    """
    is_create = existing is None

    def get_field(data_key: str, current: Any, default: Any) -> Any:
        """Get field value: record > existing > default."""
        if data_key in record:
            return record[data_key]
        if not is_create:
            return current
        return default

    # --- Name validation (required for create, optional for update) ---
    raw_name = get_field(
        const.DATA_CHORE_NAME, existing.name if existing else "", ""
    )
    name = str(raw_name).strip() if raw_name else ""
    if not name:
        raise EntityValidationError(
            field=const.DATA_CHORE_NAME,
            message=const.ERROR_CHORE_NAME_REQUIRED,
        )

    # --- Identifier: generate for create, preserve for update ---
    chore_id = str(record.get(const.DATA_CHORE_ID) or "")
    if not chore_id:
        chore_id = existing.id if existing and existing.id else str(uuid.uuid4())

    # --- Alerting time ---
    alerting_time = const.DEFAULT_ALERTING_TIME if is_create else existing.alerting_time
    if const.DATA_CHORE_ALERTING_TIME in record:
        try:
            alerting_time = _alerting_time_validator(
                record[const.DATA_CHORE_ALERTING_TIME]
            )
        except vol.Invalid as err:
            raise EntityValidationError(
                field=const.DATA_CHORE_ALERTING_TIME, message=err.msg
            ) from err

    # --- Completeable flag ---
    completeable = const.DEFAULT_COMPLETEABLE if is_create else existing.completeable
    if const.DATA_CHORE_COMPLETEABLE in record:
        try:
            completeable = _completeable_validator(
                record[const.DATA_CHORE_COMPLETEABLE]
            )
        except vol.Invalid as err:
            raise EntityValidationError(
                field=const.DATA_CHORE_COMPLETEABLE, message=err.msg
            ) from err

    # --- Schedule ---
    schedule = existing.schedule if existing else Schedule()
    if const.DATA_CHORE_SCHEDULE in record:
        schedule = build_schedule(
            record[const.DATA_CHORE_SCHEDULE] or {}, existing=schedule, tz=tz
        )

    # --- Completions ---
    completions = existing.completions if existing else ()
    if const.DATA_CHORE_COMPLETIONS in record:
        completions = _build_completions(
            record[const.DATA_CHORE_COMPLETIONS] or [], tz
        )

    return Chore(
        id=chore_id,
        name=name,
        details=str(
            get_field(
                const.DATA_CHORE_DETAILS, existing.details if existing else "", ""
            )
            or ""
        ),
        schedule=schedule,
        alerting_time=alerting_time,
        completeable=completeable,
        created_at=_parse_optional_datetime(
            record,
            const.DATA_CHORE_CREATED_AT,
            existing.created_at if existing else None,
            tz,
        ),
        deleted_at=_parse_optional_datetime(
            record,
            const.DATA_CHORE_DELETED_AT,
            existing.deleted_at if existing else None,
            tz,
        ),
        completions=completions,
    )


def chore_to_record(chore: Chore) -> ChoreRecord:
    """Serialise a chore into a record that build_chore reads back.

    Alerting time is written in whole minutes.
    """
    return {
        const.DATA_CHORE_ID: chore.id,
        const.DATA_CHORE_NAME: chore.name,
        const.DATA_CHORE_DETAILS: chore.details,
        const.DATA_CHORE_SCHEDULE: schedule_to_record(chore.schedule),
        const.DATA_CHORE_ALERTING_TIME: int(chore.alerting_time.total_seconds() // 60),
        const.DATA_CHORE_COMPLETEABLE: chore.completeable,
        const.DATA_CHORE_CREATED_AT: (
            chore.created_at.isoformat() if chore.created_at else None
        ),
        const.DATA_CHORE_DELETED_AT: (
            chore.deleted_at.isoformat() if chore.deleted_at else None
        ),
        const.DATA_CHORE_COMPLETIONS: [
            {
                const.DATA_COMPLETION_ID: completion.id,
                const.DATA_COMPLETION_COMPLETED_AT: completion.completed_at.isoformat(),
            }
            for completion in chore.completions
        ],
    }
