"""Cached, identity-bound access to one remote record table.

One generic protocol (fetch / add / update / delete, plus upsert for
singletons) configured per entity instead of five hand-written copies.

Cache policy: the cache is written only after the remote call returns
successfully. A failed call leaves the cache exactly as it was and the error
propagates to the caller. ``fetch_all`` always replaces the cache wholesale.
Nothing reconciles a write that committed remotely but failed to report back.

Every remote call carries the bound identity as an owner filter, so an id that
belongs to someone else comes back as TableError(kind=NO_ROWS).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from ..auth.model import Identity
from ..backend.table import Ordering, TableClient
from ..core.exceptions import TableError


T = TypeVar("T")

# Columns the client never writes: the server owns ids and timestamps, and
# ownership comes from the bound identity.
_PROTECTED = frozenset({"id", "user_id", "created_at", "updated_at"})


@dataclass(frozen=True)
class AccessorConfig(Generic[T]):
    name: str
    table: str
    from_row: Callable[[Mapping[str, Any]], T]
    order: Optional[Ordering] = None
    prepend_on_add: bool = False
    conflict_key: Tuple[str, ...] = ("user_id",)


def to_remote(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def clean_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: to_remote(v) for k, v in payload.items() if k not in _PROTECTED}


class _BaseAccessor(Generic[T]):
    def __init__(self, tables: TableClient, identity: Identity, config: AccessorConfig[T]):
        self._tables = tables
        self._identity = identity
        self._config = config

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def name(self) -> str:
        return self._config.name

    def _owner(self) -> Dict[str, Any]:
        return {"user_id": self._identity.user_id}

    def _owned(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        row = clean_payload(payload)
        row["user_id"] = self._identity.user_id
        return row


class RecordListAccessor(_BaseAccessor[T]):
    """Accessor for a many-per-identity table (passes, family, duties)."""

    def __init__(self, tables: TableClient, identity: Identity, config: AccessorConfig[T]):
        super().__init__(tables, identity, config)
        self._rows: List[T] = []

    @property
    def rows(self) -> Tuple[T, ...]:
        return tuple(self._rows)

    def get(self, row_id: str) -> Optional[T]:
        return next((r for r in self._rows if r.id == row_id), None)

    def fetch_all(self) -> List[T]:
        rows = self._tables.select(
            self._config.table,
            filters=self._owner(),
            order=self._config.order,
        )
        self._rows = [self._config.from_row(r) for r in rows]
        return list(self._rows)

    def add(self, payload: Mapping[str, Any]) -> T:
        created = self._config.from_row(self._tables.insert(self._config.table, self._owned(payload)))
        if self._config.prepend_on_add:
            self._rows = [created, *self._rows]
        else:
            self._rows = [*self._rows, created]
        return created

    def update(self, row_id: str, patch: Mapping[str, Any]) -> T:
        row = self._tables.update(self._config.table, row_id, clean_payload(patch), filters=self._owner())
        updated = self._config.from_row(row)
        self._rows = [updated if r.id == row_id else r for r in self._rows]
        return updated

    def delete(self, row_id: str) -> None:
        self._tables.delete(self._config.table, row_id, filters=self._owner())
        self._rows = [r for r in self._rows if r.id != row_id]

    def clear(self) -> None:
        self._rows = []


class SingleRecordAccessor(_BaseAccessor[T]):
    """Accessor for a zero-or-one-per-identity table (profile, health record)."""

    def __init__(self, tables: TableClient, identity: Identity, config: AccessorConfig[T]):
        super().__init__(tables, identity, config)
        self._record: Optional[T] = None

    @property
    def record(self) -> Optional[T]:
        return self._record

    def fetch(self) -> Optional[T]:
        try:
            row = self._tables.select_one(self._config.table, filters=self._owner())
        except TableError as exc:
            if not exc.is_no_rows:
                raise
            row = None
        self._record = self._config.from_row(row) if row else None
        return self._record

    def create(self, payload: Mapping[str, Any]) -> T:
        self._record = self._config.from_row(self._tables.insert(self._config.table, self._owned(payload)))
        return self._record

    def update(self, row_id: str, patch: Mapping[str, Any]) -> T:
        row = self._tables.update(self._config.table, row_id, clean_payload(patch), filters=self._owner())
        updated = self._config.from_row(row)
        if self._record is not None and self._record.id == row_id:
            self._record = updated
        return updated

    def upsert(self, payload: Mapping[str, Any]) -> T:
        row = self._tables.upsert(self._config.table, self._owned(payload), on_conflict=self._config.conflict_key)
        self._record = self._config.from_row(row)
        return self._record

    def delete(self, row_id: str) -> None:
        self._tables.delete(self._config.table, row_id, filters=self._owner())
        if self._record is not None and self._record.id == row_id:
            self._record = None

    def clear(self) -> None:
        self._record = None
