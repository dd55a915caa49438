"""Confirm-then-apply cache over a remote record collection.

A store mirrors one remote table for the signed-in user. Writes go to the
repository first and the local collection only changes once the repository
call has returned without error, so a failed call always leaves the cache as
it was. There is no locking: two racing mutations resolve last-writer-wins.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from typing import Any, Generic, Protocol, TypeVar
from uuid import UUID

from sermon_studio.services.auth import PrincipalProvider
from sermon_studio.services.notifications import Notifier

_logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

_SYSTEM_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


class RecordRepository(Protocol[RecordT]):
    """Persistence interface for one user-owned table."""

    def list_records(self, user_id: UUID, scope: dict[str, object]) -> list[RecordT]:
        """Return the user's records matching the scope filters."""

    def create_record(self, user_id: UUID, payload: dict[str, object]) -> RecordT:
        """Insert a record and return the stored row."""

    def update_record(
        self, user_id: UUID, record_id: UUID, patch: dict[str, object]
    ) -> None:
        """Apply a partial update to one record."""

    def delete_record(self, user_id: UUID, record_id: UUID) -> None:
        """Delete one record."""


@dataclass
class RecordStore(Generic[RecordT]):
    """In-memory source of truth for one content domain."""

    repository: RecordRepository[RecordT]
    principal: PrincipalProvider
    notifier: Notifier
    record_type: type[RecordT]
    label: str
    plural_label: str
    sort_key: Callable[[RecordT], Any]
    sort_descending: bool = False
    required_fields: tuple[str, ...] = ()
    select_created: bool = False
    announce_success: bool = False
    delete_verb: str = "delete"
    records: list[RecordT] = field(default_factory=list, init=False)
    selected: RecordT | None = field(default=None, init=False)
    is_loading: bool = field(default=False, init=False)
    _disposed: bool = field(default=False, init=False)

    async def resolve_user(self) -> UUID | None:
        """Return the signed-in user id, if any."""
        return await asyncio.to_thread(self.principal.current_user_id)

    async def fetch(self, user_id: UUID, scope: dict[str, object]) -> list[RecordT]:
        """Fetch records from the repository without touching the cache."""
        return await asyncio.to_thread(self.repository.list_records, user_id, scope)

    def replace_all(self, rows: list[RecordT]) -> None:
        """Replace the whole collection, ordered by the domain sort key."""
        if self._disposed:
            return
        self.records = sorted(rows, key=self.sort_key, reverse=self.sort_descending)

    async def load(self, **scope: object) -> list[RecordT]:
        """Reload the collection from the repository."""
        user_id = await self.resolve_user()
        if user_id is None:
            self.replace_all([])
            return []
        self.is_loading = True
        try:
            rows = await self.fetch(user_id, scope)
        except Exception:
            _logger.exception("Failed to load %s", self.plural_label)
            self.notifier.error(f"Failed to load {self.plural_label}")
            return list(self.records)
        finally:
            self.is_loading = False
        self.replace_all(rows)
        return list(self.records)

    async def create(self, payload: dict[str, object]) -> RecordT | None:
        """Persist a new record and prepend it to the collection."""
        if not self._has_required(payload):
            return None
        self._check_fields(payload)
        user_id = await self.resolve_user()
        if user_id is None:
            return None
        try:
            record = await asyncio.to_thread(
                self.repository.create_record, user_id, payload
            )
        except Exception:
            _logger.exception("Failed to create %s", self.label)
            self.notifier.error(f"Failed to add {self.label}")
            return None
        if self._disposed:
            return None
        self.records.insert(0, record)
        if self.select_created:
            self.selected = record
        if self.announce_success:
            self.notifier.success(f"{self.label.capitalize()} added")
        return record

    async def update(self, record_id: UUID, patch: dict[str, object]) -> None:
        """Persist a patch and merge it into the cached record."""
        self._check_fields(patch)
        user_id = await self.resolve_user()
        if user_id is None:
            return
        try:
            await asyncio.to_thread(
                self.repository.update_record, user_id, record_id, patch
            )
        except Exception:
            _logger.exception("Failed to update %s %s", self.label, record_id)
            self.notifier.error(f"Failed to update {self.label}")
            return
        if self._disposed:
            return
        # The timestamp is the local clock, not the server's.
        touched_at = datetime.now(tz=UTC)
        self.records = [
            replace(record, **patch, updated_at=touched_at)
            if record.id == record_id
            else record
            for record in self.records
        ]
        if self.selected is not None and self.selected.id == record_id:
            self.selected = replace(self.selected, **patch, updated_at=touched_at)
        if self.announce_success:
            self.notifier.success(f"{self.label.capitalize()} updated")

    async def delete(self, record_id: UUID) -> None:
        """Delete a record remotely, then drop it from the collection."""
        user_id = await self.resolve_user()
        if user_id is None:
            return
        try:
            await asyncio.to_thread(
                self.repository.delete_record, user_id, record_id
            )
        except Exception:
            _logger.exception("Failed to delete %s %s", self.label, record_id)
            self.notifier.error(f"Failed to {self.delete_verb} {self.label}")
            return
        if self._disposed:
            return
        self.records = [record for record in self.records if record.id != record_id]
        if self.selected is not None and self.selected.id == record_id:
            self.selected = None
        if self.announce_success:
            self.notifier.success(f"{self.label.capitalize()} deleted")

    def get(self, record_id: UUID) -> RecordT | None:
        """Return a cached record by id."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def select(self, record: RecordT | None) -> None:
        """Mark a record as the current one."""
        self.selected = record

    def dispose(self) -> None:
        """Drop cached state and ignore results of calls still in flight."""
        self._disposed = True
        self.records = []
        self.selected = None

    def _has_required(self, payload: dict[str, object]) -> bool:
        for name in self.required_fields:
            value = payload.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                return False
        return True

    def _check_fields(self, payload: dict[str, object]) -> None:
        allowed = {item.name for item in fields(self.record_type)} - _SYSTEM_FIELDS
        unknown = set(payload) - allowed
        if unknown:
            raise ValueError(
                f"Unknown {self.label} fields: {', '.join(sorted(unknown))}"
            )
