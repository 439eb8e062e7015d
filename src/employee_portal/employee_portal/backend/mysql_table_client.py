from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import utc_now
from ..core.enums import ErrorKind
from ..core.exceptions import TableError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, quote_ident
from .table import Ordering, TableClient

logger = logging.getLogger(__name__)

SERVER_COLUMNS = frozenset({"id", "created_at", "updated_at"})


def _translate(exc: mysql.connector.Error) -> TableError:
    if isinstance(exc, mysql.connector.IntegrityError):
        if exc.errno == errorcode.ER_DUP_ENTRY:
            return TableError(exc.msg, kind=ErrorKind.CONFLICT)
        return TableError(exc.msg, kind=ErrorKind.CONSTRAINT)
    if isinstance(exc, (mysql.connector.DataError, mysql.connector.ProgrammingError)):
        return TableError(exc.msg, kind=ErrorKind.INVALID_REQUEST)
    return TableError(getattr(exc, "msg", None) or str(exc), kind=ErrorKind.BACKEND)


class MySQLTableClient(TableClient):
    """TableClient over MySQL.

    Table and column names cannot be bound as parameters, so every name is
    checked against the ``schema`` whitelist before it reaches SQL.
    """

    def __init__(self, conn_factory: DatabaseConnection, schema: Mapping[str, FrozenSet[str]]):
        self._conn_factory = conn_factory
        self._schema = {table: frozenset(cols) for table, cols in schema.items()}

    # -- helpers --------------------------------------------------------
    def _columns(self, table: str) -> FrozenSet[str]:
        try:
            return self._schema[table]
        except KeyError:
            raise TableError(f"Unknown table: {table}", kind=ErrorKind.INVALID_REQUEST) from None

    def _check(self, table: str, names) -> None:
        unknown = sorted(set(names) - self._columns(table))
        if unknown:
            raise TableError(
                f"Unknown column(s) for {table}: {', '.join(unknown)}",
                kind=ErrorKind.INVALID_REQUEST,
            )

    def _where(self, table: str, filters: Mapping[str, Any]):
        self._check(table, filters.keys())
        if not filters:
            return "", ()
        clause = " AND ".join(f"{quote_ident(k)}=%s" for k in filters)
        return f" WHERE {clause}", tuple(filters.values())

    def _get_by(self, cur, table: str, filters: Mapping[str, Any]) -> Dict[str, Any]:
        where, params = self._where(table, filters)
        cur.execute(f"SELECT * FROM {quote_ident(table)}{where} LIMIT 2", params)
        rows = fetchall(cur)
        if len(rows) != 1:
            # Same contract as a hosted ".single()" call: zero or many rows is an error.
            kind = ErrorKind.NO_ROWS if not rows else ErrorKind.INVALID_REQUEST
            raise TableError(f"Expected exactly one row from {table}", kind=kind)
        return rows[0]

    # -- TableClient ----------------------------------------------------
    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any],
        order: Optional[Ordering] = None,
    ) -> List[Dict[str, Any]]:
        where, params = self._where(table, filters)
        sql = f"SELECT * FROM {quote_ident(table)}{where}"
        if order is not None:
            self._check(table, [order.column])
            sql += f" ORDER BY {quote_ident(order.column)} {'DESC' if order.descending else 'ASC'}"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return fetchall(cur)
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc

    def select_one(self, table: str, *, filters: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                return self._get_by(cur, table, filters)
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc

    def insert(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        values = {k: v for k, v in row.items() if k not in SERVER_COLUMNS}
        now = utc_now()
        values.update(id=str(uuid.uuid4()), created_at=now, updated_at=now)
        self._check(table, values.keys())

        cols = ", ".join(quote_ident(k) for k in values)
        marks = ", ".join(["%s"] * len(values))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"INSERT INTO {quote_ident(table)} ({cols}) VALUES ({marks})", tuple(values.values()))
                return self._get_by(cur, table, {"id": values["id"]})
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc

    def update(
        self,
        table: str,
        row_id: str,
        patch: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> Dict[str, Any]:
        values = {k: v for k, v in patch.items() if k not in SERVER_COLUMNS and k not in filters}
        values["updated_at"] = utc_now()
        self._check(table, values.keys())
        match = {**filters, "id": row_id}
        where, params = self._where(table, match)

        assignments = ", ".join(f"{quote_ident(k)}=%s" for k in values)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE {quote_ident(table)} SET {assignments}{where}",
                    tuple(values.values()) + params,
                )
                # rowcount only counts changed rows in MySQL; re-read to tell "no match" apart
                return self._get_by(cur, table, match)
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc

    def delete(self, table: str, row_id: str, *, filters: Mapping[str, Any]) -> None:
        where, params = self._where(table, {**filters, "id": row_id})
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {quote_ident(table)}{where}", params)
                deleted = cur.rowcount
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc
        if not deleted:
            raise TableError(f"Expected exactly one row from {table}", kind=ErrorKind.NO_ROWS)
        logger.debug("deleted %s from %s", row_id, table)

    def upsert(self, table: str, row: Mapping[str, Any], *, on_conflict: Sequence[str]) -> Dict[str, Any]:
        values = {k: v for k, v in row.items() if k not in SERVER_COLUMNS}
        missing = [c for c in on_conflict if c not in values]
        if missing:
            raise TableError(f"Upsert row lacks conflict column(s): {', '.join(missing)}", kind=ErrorKind.INVALID_REQUEST)
        now = utc_now()
        values.update(id=str(uuid.uuid4()), created_at=now, updated_at=now)
        self._check(table, values.keys())

        # The conflict key must be backed by a UNIQUE index for ON DUPLICATE KEY to apply.
        keep = {"id", "created_at", *on_conflict}
        cols = ", ".join(quote_ident(k) for k in values)
        marks = ", ".join(["%s"] * len(values))
        updates = ", ".join(f"{quote_ident(k)}=VALUES({quote_ident(k)})" for k in values if k not in keep)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO {quote_ident(table)} ({cols}) VALUES ({marks}) ON DUPLICATE KEY UPDATE {updates}",
                    tuple(values.values()),
                )
                return self._get_by(cur, table, {c: values[c] for c in on_conflict})
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc
