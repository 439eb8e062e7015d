from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence


@dataclass(frozen=True)
class Ordering:
    column: str
    descending: bool = False


class TableClient(Protocol):
    """Row-level access to the hosted relational store.

    Every failure is raised as TableError carrying an ErrorKind.
    select_one raises TableError(kind=NO_ROWS) when nothing matches; callers
    decide whether that means "absent".
    update and delete take the owner filter too, so a row id alone never
    reaches another identity's row.
    """

    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any],
        order: Optional[Ordering] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def select_one(self, table: str, *, filters: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def insert(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a row; the server assigns id, created_at and updated_at."""
        raise NotImplementedError

    def update(
        self,
        table: str,
        row_id: str,
        patch: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Partial update of the row with ``row_id`` that also matches ``filters``.

        The server stamps updated_at. No matching row raises TableError(kind=NO_ROWS).
        """
        raise NotImplementedError

    def delete(self, table: str, row_id: str, *, filters: Mapping[str, Any]) -> None:
        """Delete the row with ``row_id`` that also matches ``filters``; NO_ROWS when none does."""
        raise NotImplementedError

    def upsert(self, table: str, row: Mapping[str, Any], *, on_conflict: Sequence[str]) -> Dict[str, Any]:
        raise NotImplementedError
