# File: store.py
"""In-memory chore and completion storage.

Keeps chores and their completion history in two maps guarded by one lock,
so a web handler thread and a background job can share an instance. Chores
come back with their completions attached, ready for the engines.

export_data()/load_data() move the whole store to and from plain records
(see data_builders.chore_to_record) for backups or a persistent layer.
"""

from __future__ import annotations

from dataclasses import replace
import threading
from typing import TYPE_CHECKING, Any
import uuid

from . import const
from .data_builders import build_chore, chore_to_record
from .models import Completion
from .utils.dt_utils import dt_now_utc

if TYPE_CHECKING:
    from datetime import datetime

    from .models import Chore

DATA_META = "meta"
DATA_META_NEXT_COMPLETION_ID = "next_completion_id"
DATA_CHORES = "chores"


class ChoreNotFoundError(LookupError):
    """Raised when a chore id is not in the store."""

    def __init__(self, chore_id: str) -> None:
        """Initialize ChoreNotFoundError."""
        super().__init__(const.ERROR_CHORE_NOT_FOUND.format(chore_id=chore_id))
        self.chore_id = chore_id


class MemoryChoreStore:
    """Thread-safe in-memory storage for chores and completions.

    Chores are stored without their completions; completions live in a
    separate map keyed by chore id and are attached on every read.
    Completion ids are unique across the whole store.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._lock = threading.Lock()
        self._chores: dict[str, Chore] = {}
        self._completions: dict[str, list[Completion]] = {}
        self._next_completion_id = 1

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return the canonical empty export structure."""
        return {
            DATA_META: {DATA_META_NEXT_COMPLETION_ID: 1},
            DATA_CHORES: {},
        }

    # -------------------------------------------------------------------------
    # Chores
    # -------------------------------------------------------------------------

    def _attach(self, chore: Chore) -> Chore:
        # Caller holds the lock
        return replace(chore, completions=tuple(self._completions.get(chore.id, ())))

    def add_chore(self, chore: Chore) -> Chore:
        """Store a new chore, generating an id if it has none.

        Completions already on the chore are imported with fresh ids.
        """
        chore_id = chore.id or str(uuid.uuid4())
        with self._lock:
            stored = replace(chore, id=chore_id, completions=())
            self._chores[chore_id] = stored
            self._completions[chore_id] = []
            for completion in chore.completions:
                self._add_completion_locked(chore_id, completion.completed_at)
            const.LOGGER.debug("DEBUG: Added chore '%s' (%s)", chore.name, chore_id)
            return self._attach(stored)

    def save_chore(self, chore: Chore) -> Chore:
        """Replace a stored chore's fields; its completions are kept.

        Raises:
            ChoreNotFoundError: If the chore id is unknown.
        """
        with self._lock:
            if chore.id not in self._chores:
                raise ChoreNotFoundError(chore.id)
            stored = replace(chore, completions=())
            self._chores[chore.id] = stored
            return self._attach(stored)

    def get_chore(self, chore_id: str) -> Chore | None:
        """Return a chore with its completions, or None."""
        with self._lock:
            chore = self._chores.get(chore_id)
            return self._attach(chore) if chore is not None else None

    def all_chores(self, *, include_deleted: bool = False) -> list[Chore]:
        """Return all chores (soft-deleted ones only on request)."""
        with self._lock:
            return [
                self._attach(chore)
                for chore in self._chores.values()
                if include_deleted or chore.deleted_at is None
            ]

    def delete_chore(self, chore_id: str, now: datetime | None = None) -> Chore:
        """Soft-delete a chore by setting deleted_at.

        The chore stays in the store (and in its history) but the engines
        treat it as inactive from `now` on.

        Raises:
            ChoreNotFoundError: If the chore id is unknown.
        """
        with self._lock:
            chore = self._chores.get(chore_id)
            if chore is None:
                raise ChoreNotFoundError(chore_id)
            stored = replace(chore, deleted_at=now or dt_now_utc())
            self._chores[chore_id] = stored
            const.LOGGER.debug("DEBUG: Soft-deleted chore '%s'", chore_id)
            return self._attach(stored)

    # -------------------------------------------------------------------------
    # Completions
    # -------------------------------------------------------------------------

    def _add_completion_locked(
        self, chore_id: str, completed_at: datetime
    ) -> Completion:
        completion = Completion(id=self._next_completion_id, completed_at=completed_at)
        self._next_completion_id += 1
        self._completions.setdefault(chore_id, []).append(completion)
        return completion

    def add_completion(
        self, chore_id: str, completed_at: datetime | None = None
    ) -> Completion:
        """Record a completion (default: now).

        Raises:
            ChoreNotFoundError: If the chore id is unknown.
        """
        with self._lock:
            if chore_id not in self._chores:
                raise ChoreNotFoundError(chore_id)
            return self._add_completion_locked(chore_id, completed_at or dt_now_utc())

    def get_completions(self, chore_id: str) -> list[Completion]:
        """Return a chore's completions, most recent first."""
        with self._lock:
            return sorted(
                self._completions.get(chore_id, ()),
                key=lambda completion: completion.completed_at,
                reverse=True,
            )

    def get_latest_completion(self, chore_id: str) -> datetime | None:
        """Return the latest completion timestamp of a chore, or None."""
        completions = self.get_completions(chore_id)
        return completions[0].completed_at if completions else None

    def delete_completion(self, completion_id: int) -> bool:
        """Delete a completion by id.

        Returns:
            True if a completion was removed, False if the id was unknown.
        """
        with self._lock:
            for chore_id, completions in self._completions.items():
                for completion in completions:
                    if completion.id == completion_id:
                        completions.remove(completion)
                        const.LOGGER.debug(
                            "DEBUG: Deleted completion %s of chore '%s'",
                            completion_id,
                            chore_id,
                        )
                        return True
        const.LOGGER.debug(
            "DEBUG: %s",
            const.ERROR_COMPLETION_NOT_FOUND.format(completion_id=completion_id),
        )
        return False

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def export_data(self) -> dict[str, Any]:
        """Return the whole store as plain records (soft-deleted chores included)."""
        with self._lock:
            return {
                DATA_META: {DATA_META_NEXT_COMPLETION_ID: self._next_completion_id},
                DATA_CHORES: {
                    chore_id: chore_to_record(self._attach(chore))
                    for chore_id, chore in self._chores.items()
                },
            }

    def load_data(self, data: dict[str, Any] | None) -> None:
        """Replace the store contents with exported records.

        Completion ids are kept as exported. None loads the default structure.

        Raises:
            EntityValidationError: If a chore record is invalid.
        """
        data = data or self.get_default_structure()
        chores = {
            chore_id: build_chore({**record, const.DATA_CHORE_ID: chore_id})
            for chore_id, record in data.get(DATA_CHORES, {}).items()
        }
        max_id = max(
            (c.id for chore in chores.values() for c in chore.completions), default=0
        )
        next_id = data.get(DATA_META, {}).get(DATA_META_NEXT_COMPLETION_ID, 1)

        with self._lock:
            self._chores = {
                chore_id: replace(chore, completions=())
                for chore_id, chore in chores.items()
            }
            self._completions = {
                chore_id: list(chore.completions) for chore_id, chore in chores.items()
            }
            self._next_completion_id = max(next_id, max_id + 1)
        const.LOGGER.info("INFO: Loaded %s chores into memory store", len(chores))
