# File: seed.py
"""Starter chores from a seed file.

A seed file is YAML with a top-level `chores` list of flat entries:

    chores:
      - name: "Water plants"
        schedule_type: n_days
        n_days: 3
        time: "08:00"
      - name: "Bins"
        details: "Green bin first"
        schedule_type: weeks_of_month
        weeks: [2, 4]
        days: [friday]
        time: "19:00"
        alerting_time: 360   # minutes
      - name: "Birthday"
        schedule_type: once
        once_at: "2026-07-04T10:00"
        completeable: false

Each entry becomes a chore record for build_chore(). An unknown
`schedule_type` falls back to every N days. Invalid entries and names that
already exist in the store are logged and skipped, so one bad entry does not
stop the rest of the seed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, tzinfo
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from . import const
from .data_builders import EntityValidationError, build_chore, validate_chore_data

if TYPE_CHECKING:
    from .models import Chore
    from .store import MemoryChoreStore
    from .type_defs import ChoreRecord, ScheduleRecord, SeedRecord


def seed_to_record(seed: SeedRecord | Mapping[str, Any]) -> ChoreRecord:
    """Map a flat seed entry to a nested chore record.

    Examples:
        {"name": "Bins", "schedule_type": "n_weeks", "days": ["friday"]}
        → {"name": "Bins",
           "schedule": {"kind": "n_weeks", "weekdays": ["friday"]}}
    """
    schedule: ScheduleRecord = {}
    if const.SEED_SCHEDULE_TYPE in seed:
        kind = str(seed[const.SEED_SCHEDULE_TYPE]).strip().lower()
        if kind not in const.SCHEDULE_KIND_OPTIONS:
            const.LOGGER.debug(
                "Unknown seed schedule type '%s', using %s",
                seed[const.SEED_SCHEDULE_TYPE],
                const.SCHEDULE_KIND_N_DAYS,
            )
            kind = const.SCHEDULE_KIND_N_DAYS
        schedule[const.DATA_SCHEDULE_KIND] = kind
    if const.SEED_DAYS in seed:
        schedule[const.DATA_SCHEDULE_WEEKDAYS] = seed[const.SEED_DAYS]
    for key in const.SEED_SCHEDULE_KEYS:
        if key in seed:
            schedule[key] = seed[key]  # type: ignore[literal-required]

    record: dict[str, Any] = {
        key: seed[key] for key in const.SEED_CHORE_KEYS if key in seed
    }
    record[const.DATA_CHORE_SCHEDULE] = schedule
    return record  # type: ignore[return-value]


def load_seed(
    seeds: Iterable[SeedRecord | Mapping[str, Any]],
    store: MemoryChoreStore,
    *,
    tz: tzinfo = UTC,
) -> list[Chore]:
    """Add seed entries to a store.

    Args:
        seeds: Flat seed entries
        store: Store the chores are added to
        tz: Zone for a naive `once_at`

    Returns:
        The chores that were added, in seed order.
    """
    added: list[Chore] = []
    for seed in seeds:
        record = seed_to_record(seed)
        errors = validate_chore_data(record, store.all_chores())
        if errors:
            const.LOGGER.warning(
                "Skipping seed chore '%s': %s", seed.get(const.DATA_CHORE_NAME), errors
            )
            continue
        try:
            chore = build_chore(record, tz=tz)
        except EntityValidationError as err:
            const.LOGGER.warning(
                "Skipping seed chore '%s': %s: %s",
                seed.get(const.DATA_CHORE_NAME),
                err.field,
                err.message,
            )
            continue
        added.append(store.add_chore(chore))

    const.LOGGER.info("INFO: Seeded %s chores", len(added))
    return added


def load_seed_file(
    path: str | Path, store: MemoryChoreStore, *, tz: tzinfo = UTC
) -> list[Chore]:
    """Read a YAML seed file and add its chores to a store.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(const.ERROR_SEED_FILE_NOT_FOUND.format(path=path))

    with open(path, encoding="utf-8") as f:
        seed_data = yaml.safe_load(f) or {}

    const.LOGGER.debug("DEBUG: Loading seed file %s", path)
    return load_seed(seed_data.get(const.SEED_CHORES) or [], store, tz=tz)
