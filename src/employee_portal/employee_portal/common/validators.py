from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", {field_name: "required"})
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value.strip()) < min_len:
        raise ValidationError(
            f"{field_name} must be at least {min_len} characters",
            {field_name: f"min length {min_len}"},
        )
    return value.strip()


def require_email(value: Optional[str], field_name: str = "email") -> str:
    value = (value or "").strip()
    if not _EMAIL_RE.match(value):
        raise ValidationError("Invalid email address", {field_name: "invalid email"})
    return value.lower()


def require_choice(value: Optional[str], field_name: str, enum_cls: Type[E]) -> E:
    try:
        return enum_cls((value or "").strip())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"{field_name} must be one of: {allowed}",
            {field_name: "invalid choice"},
        ) from None


def require_date(value: Optional[str], field_name: str) -> date:
    value = require_non_empty(value, field_name)
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date", {field_name: "invalid date"}) from None


def optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return require_date(str(value), field_name)


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
