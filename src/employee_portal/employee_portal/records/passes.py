from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from ..common.datetime_utils import now_local
from ..core.constants import EXPIRING_SOON_DAYS
from ..core.enums import PassStatus
from .accessor import RecordListAccessor
from .model import EmployeePass


def expiring_soon(
    passes: Iterable[EmployeePass],
    *,
    now: Optional[datetime] = None,
    days: int = EXPIRING_SOON_DAYS,
) -> List[EmployeePass]:
    """Active passes whose expiry falls on or before now + ``days``.

    Passes already past expiry but still marked active are included.
    """
    threshold = ((now or now_local()) + timedelta(days=days)).date()
    return [p for p in passes if p.status == PassStatus.ACTIVE and p.expiry_date <= threshold]


class PassAccessor(RecordListAccessor[EmployeePass]):
    def expiring_soon(self, *, now: Optional[datetime] = None) -> List[EmployeePass]:
        # computed from the cache snapshot on every call, never stored
        return expiring_soon(self._rows, now=now)
