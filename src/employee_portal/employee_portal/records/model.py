"""Domain entities for the records a signed-in employee owns.

Plain data objects (no data access). Each is built from a table row with
``from_row`` and rendered back with ``to_dict``.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime
from ..core.constants import DUTIES_TABLE, FAMILY_TABLE, HEALTH_TABLE, PASSES_TABLE, PROFILES_TABLE
from ..core.enums import Cadre, Department, Division, PassStatus, PassType, Relation, TrainType


def _opt(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class Record:
    """Shared row (de)serialisation for the record dataclasses."""

    id: str
    user_id: str

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, (date, datetime)):
                value = value.isoformat()
            out[f.name] = value
        return out

    @classmethod
    def column_names(cls) -> FrozenSet[str]:
        return frozenset(f.name for f in fields(cls))


@dataclass(frozen=True)
class EmployeeProfile(Record):
    id: str
    user_id: str
    full_name: str
    employee_id: str
    cadre: Cadre
    department: Department
    division: Division
    designation: str
    date_of_birth: Optional[date]
    date_of_joining: Optional[date]
    phone_number: str
    address: str
    profile_image_url: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "EmployeeProfile":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            full_name=row.get("full_name") or "",
            employee_id=row.get("employee_id") or "",
            cadre=Cadre(row.get("cadre") or Cadre.SKILLED.value),
            department=Department(row.get("department") or Department.OPERATIONS.value),
            division=Division(row.get("division") or Division.CENTRAL.value),
            designation=row.get("designation") or "",
            date_of_birth=coerce_date(row.get("date_of_birth")),
            date_of_joining=coerce_date(row.get("date_of_joining")),
            phone_number=row.get("phone_number") or "",
            address=row.get("address") or "",
            profile_image_url=_opt(row.get("profile_image_url")),
            created_at=coerce_datetime(row.get("created_at")),
            updated_at=coerce_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True)
class EmployeePass(Record):
    id: str
    user_id: str
    pass_type: PassType
    train_type: TrainType
    origin: str
    destination: str
    issue_date: date
    expiry_date: date
    status: PassStatus
    remarks: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "EmployeePass":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            pass_type=PassType(row["pass_type"]),
            train_type=TrainType(row["train_type"]),
            origin=row["origin"],
            destination=row["destination"],
            issue_date=coerce_date(row["issue_date"]),
            expiry_date=coerce_date(row["expiry_date"]),
            status=PassStatus(row.get("status") or PassStatus.ACTIVE.value),
            remarks=_opt(row.get("remarks")),
            created_at=coerce_datetime(row.get("created_at")),
            updated_at=coerce_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True)
class HealthRecord(Record):
    id: str
    user_id: str
    blood_group: Optional[str]
    allergies: Optional[str]
    chronic_conditions: Optional[str]
    last_medical_check: Optional[date]
    next_medical_due: Optional[date]
    notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "HealthRecord":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            blood_group=_opt(row.get("blood_group")),
            allergies=_opt(row.get("allergies")),
            chronic_conditions=_opt(row.get("chronic_conditions")),
            last_medical_check=coerce_date(row.get("last_medical_check")),
            next_medical_due=coerce_date(row.get("next_medical_due")),
            notes=_opt(row.get("notes")),
            created_at=coerce_datetime(row.get("created_at")),
            updated_at=coerce_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True)
class FamilyMember(Record):
    id: str
    user_id: str
    full_name: str
    relation: Relation
    date_of_birth: Optional[date]
    profile_image_url: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "FamilyMember":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            full_name=row["full_name"],
            relation=Relation(row["relation"]),
            date_of_birth=coerce_date(row.get("date_of_birth")),
            profile_image_url=_opt(row.get("profile_image_url")),
            created_at=coerce_datetime(row.get("created_at")),
            updated_at=coerce_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True)
class DutyAssignment(Record):
    id: str
    user_id: str
    title: str
    location: Optional[str]
    duty_date: date
    shift: Optional[str]
    notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DutyAssignment":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            title=row["title"],
            location=_opt(row.get("location")),
            duty_date=coerce_date(row["duty_date"]),
            shift=_opt(row.get("shift")),
            notes=_opt(row.get("notes")),
            created_at=coerce_datetime(row.get("created_at")),
            updated_at=coerce_datetime(row.get("updated_at")),
        )


def table_schema() -> Dict[str, FrozenSet[str]]:
    """Column whitelist per table, used by the SQL table client."""
    return {
        PROFILES_TABLE: EmployeeProfile.column_names(),
        PASSES_TABLE: EmployeePass.column_names(),
        HEALTH_TABLE: HealthRecord.column_names(),
        FAMILY_TABLE: FamilyMember.column_names(),
        DUTIES_TABLE: DutyAssignment.column_names(),
    }
