from __future__ import annotations

from datetime import date

import pytest

from src.employee_portal.employee_portal.auth.model import Identity
from src.employee_portal.employee_portal.core.enums import Cadre, Department, Division, ErrorKind
from src.employee_portal.employee_portal.core.exceptions import TableError
from src.employee_portal.employee_portal.profile.bootstrap import ProfileBootstrap, synthesize_profile
from src.employee_portal.employee_portal.records.accessors import profile_accessor


def test_synthesized_row_uses_metadata_and_defaults(identity):
    row = synthesize_profile(identity)

    assert row["user_id"] == "user-1"
    assert row["full_name"] == "A"
    assert row["employee_id"] == "E1"
    assert row["cadre"] == "Skilled"
    assert row["department"] == "Operations"
    assert row["division"] == "Central Railway"
    assert row["designation"] == ""
    assert row["phone_number"] == ""
    assert row["date_of_birth"] is None


def test_synthesized_row_keeps_valid_metadata_choices():
    identity = Identity(
        user_id="u",
        email="x@rail.in",
        metadata={"cadre": "Officer", "department": "Medical", "division": "Bogus Railway"},
    )

    row = synthesize_profile(identity)

    assert row["cadre"] == Cadre.OFFICER.value
    assert row["department"] == Department.MEDICAL.value
    assert row["division"] == Division.CENTRAL.value


def test_bootstrap_creates_missing_profile(tables, identity):
    bootstrap = ProfileBootstrap(profile_accessor(tables, identity))

    profile = bootstrap.run()

    assert profile is not None
    assert profile.full_name == "A"
    assert profile.employee_id == "E1"
    assert profile.cadre == Cadre.SKILLED
    assert profile.department == Department.OPERATIONS
    assert profile.division == Division.CENTRAL
    assert len(tables.ops("insert")) == 1


def test_bootstrap_keeps_existing_profile(tables, identity):
    tables.seed(
        "employee_profiles",
        user_id="user-1",
        full_name="Existing",
        employee_id="E9",
        cadre="Supervisor",
        department="Electrical",
        division="Western Railway",
        date_of_birth=date(1990, 5, 4),
    )
    bootstrap = ProfileBootstrap(profile_accessor(tables, identity))

    profile = bootstrap.run()

    assert profile.full_name == "Existing"
    assert profile.date_of_birth == date(1990, 5, 4)
    assert tables.ops("insert") == []
    assert bootstrap.attempted is False


def test_failed_insert_leaves_profile_absent_and_is_not_retried(tables, identity):
    profiles = profile_accessor(tables, identity)
    bootstrap = ProfileBootstrap(profiles)
    tables.fail_next("insert", TableError("duplicate key value", kind=ErrorKind.CONFLICT))

    assert bootstrap.run() is None
    assert profiles.record is None
    assert bootstrap.last_error.kind == ErrorKind.CONFLICT

    assert bootstrap.run() is None
    assert len(tables.ops("insert")) == 1


def test_fetch_error_propagates_without_synthesis(tables, identity):
    bootstrap = ProfileBootstrap(profile_accessor(tables, identity))
    tables.fail_next("select_one", TableError("upstream timeout", kind=ErrorKind.BACKEND))

    with pytest.raises(TableError):
        bootstrap.run()
    assert tables.ops("insert") == []
    assert bootstrap.attempted is False
