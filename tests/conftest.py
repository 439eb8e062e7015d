from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import pytest

from src.employee_portal.employee_portal.auth.model import Identity
from src.employee_portal.employee_portal.backend.table import Ordering
from src.employee_portal.employee_portal.core.enums import ErrorKind
from src.employee_portal.employee_portal.core.exceptions import AuthError, StorageError, TableError


class InMemoryTables:
    """TableClient fake with the same error contract as the SQL client."""

    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.calls: List[tuple] = []
        self._ids = itertools.count(1)
        self._clock = datetime(2026, 1, 1, 8, 0, 0)
        self._failures: Dict[str, Exception] = {}

    # -- test helpers -------------------------------------------------
    def seed(self, table: str, **row) -> dict:
        row.setdefault("id", f"{table}-{next(self._ids)}")
        row.setdefault("created_at", self._tick())
        row.setdefault("updated_at", row["created_at"])
        self.tables.setdefault(table, []).append(dict(row))
        return dict(row)

    def fail_next(self, op: str, error: Optional[Exception] = None) -> None:
        self._failures[op] = error or TableError("permission denied for table", kind=ErrorKind.BACKEND)

    def ops(self, op: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == op]

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _enter(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        if op in self._failures:
            raise self._failures.pop(op)

    def _rows(self, table: str) -> List[dict]:
        return self.tables.setdefault(table, [])

    # -- TableClient --------------------------------------------------
    def select(self, table: str, *, filters: Mapping[str, Any], order: Optional[Ordering] = None):
        self._enter("select", table, dict(filters))
        rows = [dict(r) for r in self._rows(table) if all(r.get(k) == v for k, v in filters.items())]
        if order is not None:
            rows.sort(key=lambda r: str(r.get(order.column)), reverse=order.descending)
        return rows

    def select_one(self, table: str, *, filters: Mapping[str, Any]):
        self._enter("select_one", table, dict(filters))
        rows = [dict(r) for r in self._rows(table) if all(r.get(k) == v for k, v in filters.items())]
        if not rows:
            raise TableError("JSON object requested, multiple (or no) rows returned", kind=ErrorKind.NO_ROWS)
        return rows[0]

    def insert(self, table: str, row: Mapping[str, Any]):
        self._enter("insert", table, dict(row))
        now = self._tick()
        stored = {**row, "id": f"{table}-{next(self._ids)}", "created_at": now, "updated_at": now}
        self._rows(table).append(stored)
        return dict(stored)

    def _match(self, table: str, row_id: str, filters: Mapping[str, Any]) -> Optional[dict]:
        return next(
            (r for r in self._rows(table) if r["id"] == row_id and all(r.get(k) == v for k, v in filters.items())),
            None,
        )

    def update(self, table: str, row_id: str, patch: Mapping[str, Any], *, filters: Mapping[str, Any]):
        self._enter("update", table, row_id, dict(patch), dict(filters))
        r = self._match(table, row_id, filters)
        if r is None:
            raise TableError("JSON object requested, multiple (or no) rows returned", kind=ErrorKind.NO_ROWS)
        r.update(patch)
        r["updated_at"] = self._tick()
        return dict(r)

    def delete(self, table: str, row_id: str, *, filters: Mapping[str, Any]) -> None:
        self._enter("delete", table, row_id, dict(filters))
        r = self._match(table, row_id, filters)
        if r is None:
            raise TableError("JSON object requested, multiple (or no) rows returned", kind=ErrorKind.NO_ROWS)
        self.tables[table].remove(r)

    def upsert(self, table: str, row: Mapping[str, Any], *, on_conflict: Sequence[str]):
        self._enter("upsert", table, dict(row))
        for r in self._rows(table):
            if all(r.get(c) == row.get(c) for c in on_conflict):
                r.update(row)
                r["updated_at"] = self._tick()
                return dict(r)
        now = self._tick()
        stored = {**row, "id": f"{table}-{next(self._ids)}", "created_at": now, "updated_at": now}
        self._rows(table).append(stored)
        return dict(stored)


class FakeAuth:
    def __init__(self):
        self._users: Dict[str, tuple] = {}
        self._current: Optional[Identity] = None
        self._listeners: List[Callable] = []
        self._ids = itertools.count(1)

    def register(self, email: str, password: str, **metadata) -> Identity:
        identity = Identity(user_id=f"user-{next(self._ids)}", email=email, metadata=metadata)
        self._users[email] = (password, identity)
        return identity

    def emit(self, identity: Optional[Identity]) -> None:
        self._current = identity
        for listener in list(self._listeners):
            listener(identity)

    def sign_up(self, email, password, metadata):
        if email in self._users:
            raise AuthError("User already registered", kind=ErrorKind.USER_EXISTS)
        identity = self.register(email, password, **dict(metadata))
        self.emit(identity)
        return identity

    def sign_in(self, email, password):
        entry = self._users.get(email)
        if not entry or entry[0] != password:
            raise AuthError("Invalid login credentials", kind=ErrorKind.INVALID_CREDENTIALS)
        self.emit(entry[1])
        return entry[1]

    def sign_out(self):
        self.emit(None)

    def get_identity(self):
        return self._current

    def on_identity_changed(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)


class MemoryStorage:
    def __init__(self):
        self.objects: Dict[tuple, bytes] = {}
        self.calls: List[tuple] = []

    def upload(self, bucket, path, data, *, content_type="", overwrite=False):
        self.calls.append(("upload", bucket, path))
        if (bucket, path) in self.objects and not overwrite:
            raise StorageError("The resource already exists", kind=ErrorKind.OBJECT_EXISTS)
        self.objects[(bucket, path)] = data
        return path

    def get_public_url(self, bucket, path):
        return f"https://cdn.test/storage/{bucket}/{path}"

    def remove(self, bucket, paths):
        self.calls.append(("remove", bucket, tuple(paths)))
        for path in paths:
            self.objects.pop((bucket, path), None)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 9, 0, 0)


@pytest.fixture
def tables() -> InMemoryTables:
    return InMemoryTables()


@pytest.fixture
def auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def identity() -> Identity:
    return Identity(user_id="user-1", email="a@rail.in", metadata={"full_name": "A", "employee_id": "E1"})


class ScriptedCursor:
    """DB-API cursor double: each execute() consumes the next scripted outcome.

    An outcome is a list of rows (for SELECTs), an int (rowcount) or an
    exception to raise.
    """

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.executed: List[tuple] = []
        self.rowcount = 0
        self._rows: List[dict] = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), tuple(params)))
        outcome = self.outcomes.pop(0) if self.outcomes else []
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            self.rowcount, self._rows = outcome, []
        else:
            self.rowcount, self._rows = len(outcome), [dict(r) for r in outcome]

    def fetchall(self):
        return list(self._rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, cursor: ScriptedCursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class ScriptedDatabase:
    """Stands in for DatabaseConnection; every connect() shares one cursor."""

    def __init__(self, *outcomes):
        self.cursor = ScriptedCursor(outcomes)
        self.conn = ScriptedConnection(self.cursor)

    def connect(self, *, with_database: bool = True):
        return self.conn

    @property
    def statements(self) -> List[str]:
        return [sql for sql, _ in self.cursor.executed]


@pytest.fixture
def scripted_db():
    return ScriptedDatabase
