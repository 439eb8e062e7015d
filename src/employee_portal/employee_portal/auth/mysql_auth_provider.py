from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Callable, List, Mapping, Optional

import mysql.connector
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import utc_now
from ..core.constants import AUTH_USERS_TABLE
from ..core.enums import ErrorKind
from ..core.exceptions import AuthError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Identity
from .provider import AuthProvider, IdentityListener

logger = logging.getLogger(__name__)


def _identity_from_row(row: dict) -> Identity:
    raw = row.get("user_metadata") or "{}"
    try:
        metadata = json.loads(raw)
    except ValueError:
        metadata = {}
    return Identity(user_id=str(row["id"]), email=row["email"], metadata=metadata)


class MySQLAuthProvider(AuthProvider):
    """Auth collaborator backed by the ``auth_users`` table.

    The signed-in identity lives in this process only, matching a single
    interactive session per portal process.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._current: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []

    def _set_current(self, identity: Optional[Identity]) -> None:
        self._current = identity
        for listener in list(self._listeners):
            listener(identity)

    def _get_by_email(self, email: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id, email, password_hash, user_metadata FROM {AUTH_USERS_TABLE} WHERE email=%s",
                (email,),
            )
            return fetchone(cur)

    def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> Identity:
        email = email.strip().lower()
        try:
            if self._get_by_email(email):
                raise AuthError("User already registered", kind=ErrorKind.USER_EXISTS)

            user_id = str(uuid.uuid4())
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO {AUTH_USERS_TABLE}(id, email, password_hash, user_metadata, created_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (user_id, email, generate_password_hash(password), json.dumps(dict(metadata)), utc_now()),
                )
        except mysql.connector.IntegrityError as exc:
            raise AuthError("User already registered", kind=ErrorKind.USER_EXISTS) from exc
        except mysql.connector.Error as exc:
            raise AuthError(exc.msg, kind=ErrorKind.BACKEND) from exc

        identity = Identity(user_id=user_id, email=email, metadata=dict(metadata))
        logger.info("signed up %s", email)
        self._set_current(identity)
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        email = email.strip().lower()
        try:
            row = self._get_by_email(email)
        except mysql.connector.Error as exc:
            raise AuthError(exc.msg, kind=ErrorKind.BACKEND) from exc

        try:
            ok = bool(row) and check_password_hash(row["password_hash"], password)
        except ValueError:
            # unknown hash method stored in the row
            ok = False
        if not ok:
            raise AuthError("Invalid login credentials", kind=ErrorKind.INVALID_CREDENTIALS)

        identity = _identity_from_row(row)
        self._set_current(identity)
        return identity

    def sign_out(self) -> None:
        self._set_current(None)

    def get_identity(self) -> Optional[Identity]:
        return self._current

    def on_identity_changed(self, listener: IdentityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
