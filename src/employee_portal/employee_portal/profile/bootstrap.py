from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from ..auth.model import Identity
from ..core.enums import Cadre, Department, Division
from ..core.exceptions import RemoteError
from ..records.accessor import SingleRecordAccessor
from ..records.model import EmployeeProfile

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_TEXT_FIELDS = ("full_name", "employee_id", "designation", "phone_number", "address")
_DATE_FIELDS = ("date_of_birth", "date_of_joining")


def _choice(enum_cls: Type[E], value: Any, default: E) -> E:
    if not value:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("ignoring unknown %s %r in identity metadata", enum_cls.__name__, value)
        return default


def synthesize_profile(identity: Identity) -> Dict[str, Any]:
    """Build a profile row from sign-up metadata, filling fixed defaults."""
    meta = identity.metadata or {}
    row: Dict[str, Any] = {"user_id": identity.user_id}
    for name in _TEXT_FIELDS:
        row[name] = str(meta.get(name) or "")
    for name in _DATE_FIELDS:
        row[name] = meta.get(name) or None
    row["cadre"] = _choice(Cadre, meta.get("cadre"), Cadre.SKILLED).value
    row["department"] = _choice(Department, meta.get("department"), Department.OPERATIONS).value
    row["division"] = _choice(Division, meta.get("division"), Division.CENTRAL).value
    return row


class ProfileBootstrap:
    """Creates the missing profile once per session.

    A failed insert is not retried; the profile stays absent and the manual
    creation path takes over.
    """

    def __init__(self, profiles: SingleRecordAccessor[EmployeeProfile]):
        self._profiles = profiles
        self._attempted = False
        self.last_error: Optional[RemoteError] = None

    @property
    def attempted(self) -> bool:
        return self._attempted

    def run(self) -> Optional[EmployeeProfile]:
        profile = self._profiles.fetch()
        if profile is not None or self._attempted:
            return profile

        self._attempted = True
        identity = self._profiles.identity
        try:
            profile = self._profiles.create(synthesize_profile(identity))
        except RemoteError as exc:
            self.last_error = exc
            logger.warning("could not create profile for %s: %s", identity.user_id, exc)
            return None

        logger.info("created profile %s for %s from sign-up metadata", profile.id, identity.user_id)
        return profile
