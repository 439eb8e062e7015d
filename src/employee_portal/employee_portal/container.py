from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .auth.mysql_auth_provider import MySQLAuthProvider
from .auth.provider import AuthProvider
from .auth.session import SessionProvider
from .backend.mysql_table_client import MySQLTableClient
from .backend.table import TableClient
from .database.connection import DBConfig, DatabaseConnection
from .records.model import table_schema
from .scope import PortalContext, ScopeRegistry
from .storage.local_storage import LocalObjectStorage
from .storage.storage import ObjectStorage


@dataclass(frozen=True)
class Container:
    auth: AuthProvider
    tables: TableClient
    storage: ObjectStorage

    session: SessionProvider
    portal: PortalContext
    scopes: ScopeRegistry


def assemble(*, auth: AuthProvider, tables: TableClient, storage: ObjectStorage) -> Container:
    """Wire the session and portal around already-built collaborators.

    ``session`` and ``portal`` follow one interactive session (scripts); the
    HTTP front end keeps identities per client and uses ``scopes`` instead.
    """
    session = SessionProvider(auth)
    portal = PortalContext(session, tables)
    return Container(
        auth=auth,
        tables=tables,
        storage=storage,
        session=session,
        portal=portal,
        scopes=ScopeRegistry(tables),
    )


def build_container(*, db_config: dict, storage_root: str | Path, storage_public_url: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble(
        auth=MySQLAuthProvider(conn),
        tables=MySQLTableClient(conn, table_schema()),
        storage=LocalObjectStorage(storage_root, storage_public_url),
    )
