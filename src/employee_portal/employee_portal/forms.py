"""Input forms: validate raw request fields into payloads for the accessors.

Every form collects all field errors before raising one ValidationError.
With ``partial=True`` (PATCH requests) only the supplied fields are checked.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .common.validators import (
    optional_date,
    optional_text,
    require_choice,
    require_date,
    require_email,
    require_min_length,
    require_non_empty,
)
from .core.constants import MIN_ADDRESS_LENGTH, MIN_PASSWORD_LENGTH, MIN_PHONE_LENGTH
from .core.enums import Cadre, Department, Division, PassStatus, PassType, Relation, TrainType
from .core.exceptions import ValidationError
from .records.model import EmployeePass


class _Form:
    def __init__(self, data: Mapping[str, Any], *, partial: bool = False):
        self._data = data
        self._partial = partial
        self.values: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}

    def field(self, name: str, check: Callable[[Optional[str]], Any]) -> None:
        if self._partial and name not in self._data:
            return
        raw = self._data.get(name)
        try:
            self.values[name] = check(None if raw is None else str(raw))
        except ValidationError as exc:
            self.errors[name] = str(exc)

    def error(self, name: str, message: str) -> None:
        self.errors.setdefault(name, message)

    def done(self) -> Dict[str, Any]:
        if self.errors:
            raise ValidationError("Please correct the highlighted fields", self.errors)
        return self.values


def _profile_fields(form: _Form) -> None:
    form.field("full_name", lambda v: require_min_length(v, "full_name", 2))
    form.field("cadre", lambda v: require_choice(v, "cadre", Cadre))
    form.field("department", lambda v: require_choice(v, "department", Department))
    form.field("division", lambda v: require_choice(v, "division", Division))
    form.field("designation", lambda v: require_non_empty(v, "designation"))
    form.field("date_of_birth", lambda v: require_date(v, "date_of_birth"))
    form.field("date_of_joining", lambda v: require_date(v, "date_of_joining"))
    form.field("phone_number", lambda v: require_min_length(v, "phone_number", MIN_PHONE_LENGTH))
    form.field("address", lambda v: require_min_length(v, "address", MIN_ADDRESS_LENGTH))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def sign_in_form(data: Mapping[str, Any]) -> Tuple[str, str]:
    form = _Form(data)
    form.field("email", require_email)
    form.field("password", lambda v: require_min_length(v, "password", MIN_PASSWORD_LENGTH))
    values = form.done()
    return values["email"], str(data["password"])


def sign_up_form(data: Mapping[str, Any]) -> Tuple[str, str, Dict[str, Any]]:
    """Returns ``(email, password, metadata)``; the metadata later seeds the profile."""
    form = _Form(data)
    form.field("email", require_email)
    form.field("password", lambda v: require_min_length(v, "password", MIN_PASSWORD_LENGTH))
    if data.get("password") != data.get("confirm_password"):
        form.error("confirm_password", "Passwords don't match")
    form.field("employee_id", lambda v: require_non_empty(v, "employee_id"))
    _profile_fields(form)
    values = form.done()

    metadata = {k: _plain(v) for k, v in values.items() if k not in ("email", "password")}
    return values["email"], str(data["password"]), metadata


def profile_form(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    form = _Form(data, partial=partial)
    _profile_fields(form)
    form.field("profile_image_url", optional_text)
    return form.done()


def create_profile_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    form = _Form(data)
    form.field("employee_id", lambda v: require_non_empty(v, "employee_id"))
    _profile_fields(form)
    form.field("profile_image_url", optional_text)
    return form.done()


def pass_form(
    data: Mapping[str, Any],
    *,
    partial: bool = False,
    current: Optional[EmployeePass] = None,
) -> Dict[str, Any]:
    """Validate a pass payload.

    For a partial edit, ``current`` supplies the stored dates the patch leaves
    out, so the expiry-after-issue rule holds for the merged row.
    """
    form = _Form(data, partial=partial)
    form.field("pass_type", lambda v: require_choice(v, "pass_type", PassType))
    form.field("train_type", lambda v: require_choice(v, "train_type", TrainType))
    form.field("origin", lambda v: require_non_empty(v, "origin"))
    form.field("destination", lambda v: require_non_empty(v, "destination"))
    form.field("issue_date", lambda v: require_date(v, "issue_date"))
    form.field("expiry_date", lambda v: require_date(v, "expiry_date"))
    form.field("status", lambda v: require_choice(v or PassStatus.ACTIVE.value, "status", PassStatus))
    form.field("remarks", optional_text)

    issue = form.values.get("issue_date", current.issue_date if current else None)
    expiry = form.values.get("expiry_date", current.expiry_date if current else None)
    if issue and expiry and expiry < issue:
        form.error("expiry_date", "Expiry date must be on or after the issue date")
    return form.done()


def health_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    form = _Form(data)
    for name in ("blood_group", "allergies", "chronic_conditions", "notes"):
        form.field(name, optional_text)
    form.field("last_medical_check", lambda v: optional_date(v, "last_medical_check"))
    form.field("next_medical_due", lambda v: optional_date(v, "next_medical_due"))
    return form.done()


def family_member_form(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    form = _Form(data, partial=partial)
    form.field("full_name", lambda v: require_non_empty(v, "full_name"))
    form.field("relation", lambda v: require_choice(v, "relation", Relation))
    form.field("date_of_birth", lambda v: optional_date(v, "date_of_birth"))
    form.field("profile_image_url", optional_text)
    return form.done()


def duty_form(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    form = _Form(data, partial=partial)
    form.field("title", lambda v: require_non_empty(v, "title"))
    form.field("duty_date", lambda v: require_date(v, "duty_date"))
    form.field("location", optional_text)
    form.field("shift", optional_text)
    form.field("notes", optional_text)
    return form.done()
