"""Per-entity configuration of the generic accessor."""
from __future__ import annotations

from ..auth.model import Identity
from ..backend.table import Ordering, TableClient
from ..core.constants import DUTIES_TABLE, FAMILY_TABLE, HEALTH_TABLE, PASSES_TABLE, PROFILES_TABLE
from .accessor import AccessorConfig, RecordListAccessor, SingleRecordAccessor
from .model import DutyAssignment, EmployeePass, EmployeeProfile, FamilyMember, HealthRecord
from .passes import PassAccessor

PROFILE = AccessorConfig(name="profile", table=PROFILES_TABLE, from_row=EmployeeProfile.from_row)
PASSES = AccessorConfig(
    name="passes",
    table=PASSES_TABLE,
    from_row=EmployeePass.from_row,
    order=Ordering("expiry_date"),
)
HEALTH = AccessorConfig(name="health", table=HEALTH_TABLE, from_row=HealthRecord.from_row)
FAMILY = AccessorConfig(
    name="family",
    table=FAMILY_TABLE,
    from_row=FamilyMember.from_row,
    order=Ordering("created_at", descending=True),
    prepend_on_add=True,
)
DUTIES = AccessorConfig(
    name="duties",
    table=DUTIES_TABLE,
    from_row=DutyAssignment.from_row,
    order=Ordering("duty_date"),
)


def profile_accessor(tables: TableClient, identity: Identity) -> SingleRecordAccessor[EmployeeProfile]:
    return SingleRecordAccessor(tables, identity, PROFILE)


def pass_accessor(tables: TableClient, identity: Identity) -> PassAccessor:
    return PassAccessor(tables, identity, PASSES)


def health_accessor(tables: TableClient, identity: Identity) -> SingleRecordAccessor[HealthRecord]:
    return SingleRecordAccessor(tables, identity, HEALTH)


def family_accessor(tables: TableClient, identity: Identity) -> RecordListAccessor[FamilyMember]:
    return RecordListAccessor(tables, identity, FAMILY)


def duty_accessor(tables: TableClient, identity: Identity) -> RecordListAccessor[DutyAssignment]:
    return RecordListAccessor(tables, identity, DUTIES)
