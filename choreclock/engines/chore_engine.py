"""Chore Engine - Pure logic for chore status derivation.

This engine provides stateless, pure Python functions for:
- Activity window checks (created_at / deleted_at)
- Due / alerting / completed queries against the schedule searches
- Classification into homepage status buckets
- Chore list sorting

ARCHITECTURE: This is a pure logic engine with no storage dependencies.
All functions are static methods that operate on passed-in data; the time
zone and the reference instant are always explicit arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import const
from ..models import Once
from . import schedule_engine

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime, tzinfo

    from ..models import Chore


# =============================================================================
# CHORE SNAPSHOT DATA STRUCTURE
# =============================================================================


@dataclass
class ChoreSnapshot:
    """Derived view of a chore at one instant.

    Returned by ChoreEngine.snapshot() so list views can sort and render
    without repeating the schedule searches.

    Attributes:
        chore: The chore the values were derived from
        status: One of const.CHORE_STATUS_*
        most_recent_due: Latest occurrence at or before the instant (with fallback)
        next_due: First occurrence after the instant (DISTANT_FUTURE if none)
        last_completion: Latest completion timestamp, None if never completed
    """

    chore: Chore
    status: str
    most_recent_due: datetime
    next_due: datetime
    last_completion: datetime | None = None


# =============================================================================
# CHORE ENGINE
# =============================================================================


class ChoreEngine:
    """Pure logic engine for chore status derivation.

    All methods are static - no instance state. Every query takes `now`
    explicitly, which keeps results reproducible in tests.
    """

    # =========================================================================
    # ACTIVITY AND COMPLETION QUERIES
    # =========================================================================

    @staticmethod
    def is_inactive(chore: Chore, now: datetime) -> bool:
        """Check if the chore is outside its lifetime.

        Returns:
            True if created in the future or deleted in the past.
        """
        if chore.created_at is not None and now < chore.created_at:
            return True
        return chore.deleted_at is not None and now > chore.deleted_at

    @staticmethod
    def last_completion(chore: Chore) -> datetime | None:
        """Return the latest completion timestamp, regardless of list order."""
        if not chore.completions:
            return None
        return max(completion.completed_at for completion in chore.completions)

    @staticmethod
    def is_once_completed(chore: Chore, now: datetime) -> bool:
        """Check if a one-off chore's instant has already passed."""
        variant = chore.schedule.active
        return isinstance(variant, Once) and variant.at <= now

    @staticmethod
    def is_once_expired(chore: Chore, now: datetime) -> bool:
        """Check if a one-off passed more than RECENTLY_OCCURRED_WINDOW ago.

        A one-off has no further occurrence: once this is true it is never
        due again, and classify() reports it as past unless it was completed.
        """
        if not ChoreEngine.is_once_completed(chore, now):
            return False
        return now - chore.schedule.once.at > const.RECENTLY_OCCURRED_WINDOW

    # =========================================================================
    # STATUS QUERIES
    # =========================================================================

    @staticmethod
    def is_due(chore: Chore, now: datetime, tz: tzinfo) -> bool:
        """Check if the most recent occurrence is still waiting for completion.

        False for inactive or non-completeable chores, for one-offs that
        passed over a day ago, and when no real occurrence lies inside the
        search horizon (the fallback instant is never treated as due).
        """
        if ChoreEngine.is_inactive(chore, now) or not chore.completeable:
            return False
        if ChoreEngine.is_once_expired(chore, now):
            return False

        recent = schedule_engine.find_most_recent_occurrence(chore.schedule, now, tz)
        if recent is None:
            return False

        latest = ChoreEngine.last_completion(chore)
        return latest is None or latest <= recent

    @staticmethod
    def is_alerting(chore: Chore, now: datetime, tz: tzinfo) -> bool:
        """Check if the next occurrence falls inside the alert window.

        Window: now < next_due <= now + alerting_time. DISTANT_FUTURE never
        alerts.
        """
        if ChoreEngine.is_inactive(chore, now):
            return False

        upcoming = schedule_engine.next_due(chore.schedule, now, tz)
        if upcoming >= const.DISTANT_FUTURE:
            return False
        return now < upcoming <= now + chore.alerting_time

    @staticmethod
    def is_completed(chore: Chore, now: datetime, tz: tzinfo) -> bool:
        """Check if the chore was completed after its most recent occurrence."""
        latest = ChoreEngine.last_completion(chore)
        if latest is None:
            return False
        return latest > schedule_engine.most_recent_due(chore.schedule, now, tz)

    @staticmethod
    def is_recently_occurred(chore: Chore, now: datetime, tz: tzinfo) -> bool:
        """Check if an occurrence passed within RECENTLY_OCCURRED_WINDOW."""
        recent = schedule_engine.find_most_recent_occurrence(chore.schedule, now, tz)
        return recent is not None and now - recent <= const.RECENTLY_OCCURRED_WINDOW

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    @staticmethod
    def classify(chore: Chore, now: datetime, tz: tzinfo) -> str:
        """Derive the homepage status of a chore.

        Priority:
        - inactive
        - completeable: completed > past > due > alerting > upcoming
        - not completeable: past > alerting > recently_occurred > recurring_event

        "past" is a one-off whose instant lies more than a day behind.

        Returns:
            One of const.CHORE_STATUS_*.
        """
        if ChoreEngine.is_inactive(chore, now):
            return const.CHORE_STATUS_INACTIVE

        if not chore.completeable:
            if ChoreEngine.is_once_expired(chore, now):
                return const.CHORE_STATUS_PAST
            if ChoreEngine.is_alerting(chore, now, tz):
                return const.CHORE_STATUS_ALERTING
            if ChoreEngine.is_recently_occurred(chore, now, tz):
                return const.CHORE_STATUS_RECENTLY_OCCURRED
            return const.CHORE_STATUS_RECURRING_EVENT

        if ChoreEngine.is_completed(chore, now, tz):
            return const.CHORE_STATUS_COMPLETED
        if ChoreEngine.is_once_expired(chore, now):
            return const.CHORE_STATUS_PAST
        if ChoreEngine.is_due(chore, now, tz):
            return const.CHORE_STATUS_DUE
        if ChoreEngine.is_alerting(chore, now, tz):
            return const.CHORE_STATUS_ALERTING
        return const.CHORE_STATUS_UPCOMING

    @staticmethod
    def snapshot(chore: Chore, now: datetime, tz: tzinfo) -> ChoreSnapshot:
        """Derive status and due instants for a chore in one pass."""
        return ChoreSnapshot(
            chore=chore,
            status=ChoreEngine.classify(chore, now, tz),
            most_recent_due=schedule_engine.most_recent_due(chore.schedule, now, tz),
            next_due=schedule_engine.next_due(chore.schedule, now, tz),
            last_completion=ChoreEngine.last_completion(chore),
        )

    @staticmethod
    def categorize(
        chores: Iterable[Chore], now: datetime, tz: tzinfo
    ) -> dict[str, list[Chore]]:
        """Group chores into status buckets, each sorted by next due.

        Returns:
            Dict keyed by every status in CHORE_STATUS_ORDER (empty lists for
            unused buckets).
        """
        snapshots = sorted(
            (ChoreEngine.snapshot(chore, now, tz) for chore in chores),
            key=lambda snap: snap.next_due,
        )
        buckets: dict[str, list[Chore]] = {
            status: [] for status in const.CHORE_STATUS_ORDER
        }
        for snap in snapshots:
            buckets[snap.status].append(snap.chore)
        return buckets

    @staticmethod
    def sort_chores(
        chores: Iterable[Chore],
        sort: str = const.DEFAULT_SORT,
        now: datetime | None = None,
        tz: tzinfo | None = None,
    ) -> list[Chore]:
        """Sort chores for the list view.

        Args:
            chores: Chores to sort
            sort: SORT_BY_NAME (case-insensitive) or SORT_BY_DUE (next due)
            now: Reference instant, required for SORT_BY_DUE
            tz: Zone for the schedule search, required for SORT_BY_DUE

        Raises:
            ValueError: Unknown sort order, or SORT_BY_DUE without now/tz.
        """
        match sort:
            case const.SORT_BY_NAME:
                return sorted(chores, key=lambda chore: chore.name.lower())
            case const.SORT_BY_DUE:
                if now is None or tz is None:
                    raise ValueError("Sorting by due date requires now and tz")
                return sorted(
                    chores,
                    key=lambda chore: schedule_engine.next_due(
                        chore.schedule, now, tz
                    ),
                )
        raise ValueError(f"Unknown sort order '{sort}'")
