from __future__ import annotations

from datetime import date

import pytest

from src.employee_portal.employee_portal.auth.model import Identity
from src.employee_portal.employee_portal.core.enums import ErrorKind, Relation
from src.employee_portal.employee_portal.core.exceptions import TableError
from src.employee_portal.employee_portal.records.accessors import (
    duty_accessor,
    family_accessor,
    health_accessor,
    pass_accessor,
)


def _pass(**overrides):
    row = dict(
        pass_type="Privilege",
        train_type="Express",
        origin="Mumbai CST",
        destination="Pune",
        issue_date=date(2026, 1, 1),
        expiry_date=date(2026, 6, 30),
        status="active",
    )
    row.update(overrides)
    return row


def test_fetch_all_replaces_cache_instead_of_merging(tables, identity):
    for i in range(3):
        tables.seed("duty_assignments", user_id="user-1", title=f"old {i}", duty_date=date(2026, 2, i + 1))
    duties = duty_accessor(tables, identity)
    assert len(duties.fetch_all()) == 3

    tables.tables["duty_assignments"] = []
    tables.seed("duty_assignments", user_id="user-1", title="new", duty_date=date(2026, 3, 1))
    tables.seed("duty_assignments", user_id="user-1", title="newer", duty_date=date(2026, 3, 2))

    duties.fetch_all()
    assert [d.title for d in duties.rows] == ["new", "newer"]


def test_fetch_all_only_reads_rows_of_bound_identity(tables, identity):
    tables.seed("employee_passes", user_id="user-1", **_pass(origin="Mine"))
    tables.seed("employee_passes", user_id="user-2", **_pass(origin="Theirs"))

    passes = pass_accessor(tables, identity)
    passes.fetch_all()

    assert [p.origin for p in passes.rows] == ["Mine"]
    assert tables.ops("select")[0][2] == {"user_id": "user-1"}


def test_passes_ordered_by_expiry_and_duties_by_date(tables, identity):
    tables.seed("employee_passes", user_id="user-1", **_pass(origin="late", expiry_date=date(2026, 9, 1)))
    tables.seed("employee_passes", user_id="user-1", **_pass(origin="soon", expiry_date=date(2026, 3, 1)))
    tables.seed("duty_assignments", user_id="user-1", title="second", duty_date=date(2026, 2, 10))
    tables.seed("duty_assignments", user_id="user-1", title="first", duty_date=date(2026, 2, 5))

    passes = pass_accessor(tables, identity)
    duties = duty_accessor(tables, identity)

    assert [p.origin for p in passes.fetch_all()] == ["soon", "late"]
    assert [d.title for d in duties.fetch_all()] == ["first", "second"]


def test_family_members_newest_first_and_add_prepends(tables, identity):
    tables.seed("family_members", user_id="user-1", full_name="Older", relation="father")
    tables.seed("family_members", user_id="user-1", full_name="Newer", relation="mother")
    family = family_accessor(tables, identity)
    family.fetch_all()
    assert [m.full_name for m in family.rows] == ["Newer", "Older"]

    added = family.add({"full_name": "Child", "relation": Relation.SON})

    assert added.relation == Relation.SON
    assert [m.full_name for m in family.rows] == ["Child", "Newer", "Older"]


def test_add_appends_for_passes_and_forces_owner(tables, identity):
    tables.seed("employee_passes", user_id="user-1", **_pass(origin="existing"))
    passes = pass_accessor(tables, identity)
    passes.fetch_all()

    created = passes.add({**_pass(origin="added"), "user_id": "someone-else", "id": "client-id"})

    assert created.user_id == "user-1"
    assert created.id != "client-id"
    assert [p.origin for p in passes.rows] == ["existing", "added"]


def test_failed_add_leaves_cache_untouched(tables, identity):
    tables.seed("duty_assignments", user_id="user-1", title="kept", duty_date=date(2026, 2, 5))
    duties = duty_accessor(tables, identity)
    duties.fetch_all()
    before = duties.rows

    tables.fail_next("insert", TableError("new row violates row-level security policy", kind=ErrorKind.CONSTRAINT))
    with pytest.raises(TableError) as exc_info:
        duties.add({"title": "x", "duty_date": date(2026, 2, 6)})

    assert exc_info.value.kind == ErrorKind.CONSTRAINT
    assert duties.rows == before


def test_add_then_fetch_converges_to_same_cache(tables, identity):
    passes = pass_accessor(tables, identity)
    passes.add(_pass())
    after_add = passes.rows

    passes.fetch_all()

    assert passes.rows == after_add


def test_update_replaces_only_matching_row(tables, identity):
    a = tables.seed("employee_passes", user_id="user-1", **_pass(origin="A", expiry_date=date(2026, 3, 1)))
    tables.seed("employee_passes", user_id="user-1", **_pass(origin="B", expiry_date=date(2026, 4, 1)))
    passes = pass_accessor(tables, identity)
    passes.fetch_all()
    untouched = passes.rows[1]

    updated = passes.update(a["id"], {"destination": "Nagpur"})

    assert updated.destination == "Nagpur"
    assert updated.updated_at > updated.created_at
    assert passes.rows[0] == updated
    assert passes.rows[1] is untouched


def test_failed_update_leaves_cached_row_identical(tables, identity):
    row = tables.seed("family_members", user_id="user-1", full_name="Asha", relation="spouse")
    family = family_accessor(tables, identity)
    family.fetch_all()
    before = family.get(row["id"])

    tables.fail_next("update")
    with pytest.raises(TableError):
        family.update(row["id"], {"full_name": "Changed"})

    assert family.get(row["id"]) == before
    assert family.get(row["id"]).to_dict() == before.to_dict()


def test_delete_removes_cached_row_on_success_only(tables, identity):
    row = tables.seed("duty_assignments", user_id="user-1", title="Night patrol", duty_date=date(2026, 2, 5))
    duties = duty_accessor(tables, identity)
    duties.fetch_all()

    tables.fail_next("delete")
    with pytest.raises(TableError):
        duties.delete(row["id"])
    assert len(duties.rows) == 1

    duties.delete(row["id"])
    assert duties.rows == ()


def test_health_fetch_missing_row_is_absent(tables, identity):
    health = health_accessor(tables, identity)

    assert health.fetch() is None
    assert health.record is None


def test_health_fetch_other_errors_propagate(tables, identity):
    health = health_accessor(tables, identity)
    tables.fail_next("select_one", TableError("connection refused", kind=ErrorKind.BACKEND))

    with pytest.raises(TableError) as exc_info:
        health.fetch()
    assert exc_info.value.kind == ErrorKind.BACKEND


def test_health_upsert_replaces_singleton(tables, identity):
    health = health_accessor(tables, identity)

    first = health.upsert({"blood_group": "B+"})
    second = health.upsert({"blood_group": "O+", "allergies": "penicillin"})

    assert first.id == second.id
    assert health.record == second
    assert health.record.blood_group == "O+"
    assert len(tables.tables["health_records"]) == 1


def test_health_upsert_failure_keeps_previous_record(tables, identity):
    health = health_accessor(tables, identity)
    original = health.upsert({"blood_group": "B+"})

    tables.fail_next("upsert")
    with pytest.raises(TableError):
        health.upsert({"blood_group": "AB-"})

    assert health.record == original


def test_accessors_for_different_identities_do_not_share_cache(tables, identity):
    other = Identity(user_id="user-2", email="b@rail.in")
    mine = duty_accessor(tables, identity)
    theirs = duty_accessor(tables, other)

    mine.add({"title": "Mine", "duty_date": date(2026, 2, 1)})

    assert theirs.rows == ()
    assert theirs.fetch_all() == []


def test_update_of_another_identitys_row_is_refused(tables, identity):
    theirs = tables.seed("employee_passes", user_id="user-2", **_pass(origin="Theirs"))
    passes = pass_accessor(tables, identity)

    with pytest.raises(TableError) as exc_info:
        passes.update(theirs["id"], {"status": "revoked"})

    assert exc_info.value.is_no_rows
    assert tables.tables["employee_passes"][0]["status"] == "active"
    assert tables.ops("update")[0][4] == {"user_id": "user-1"}


def test_delete_of_another_identitys_row_is_refused(tables, identity):
    theirs = tables.seed("family_members", user_id="user-2", full_name="Not mine", relation="spouse")
    family = family_accessor(tables, identity)

    with pytest.raises(TableError) as exc_info:
        family.delete(theirs["id"])

    assert exc_info.value.is_no_rows
    assert [r["id"] for r in tables.tables["family_members"]] == [theirs["id"]]


def test_singleton_update_is_scoped_to_owner(tables, identity):
    theirs = tables.seed("health_records", user_id="user-2", blood_group="A+")
    health = health_accessor(tables, identity)

    with pytest.raises(TableError):
        health.update(theirs["id"], {"blood_group": "O-"})

    assert tables.tables["health_records"][0]["blood_group"] == "A+"
