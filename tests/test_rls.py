# tests/test_rls.py
import pytest

import rls
from controllers import finance, notes, profiles, projects, team
from controllers.base import changed_fields
from errors import PolicyViolation
from models import AppRole, AuthUser, Project
from rls import has_role


def test_has_role(session, admin, member):
    assert has_role(session, admin.user_id, AppRole.admin)
    assert has_role(session, admin.user_id, "admin")
    assert not has_role(session, member.user_id, AppRole.admin)
    assert has_role(session, member.user_id, AppRole.member)
    assert not has_role(session, "", AppRole.admin)
    assert not has_role(session, member.user_id, "superuser")


def test_every_app_table_has_a_policy():
    for table in ("projects", "tasks", "notes", "finance_records", "payments", "profiles", "user_roles"):
        assert table in rls.POLICIES


def test_unregistered_table_fails_closed(session, admin):
    with pytest.raises(PolicyViolation):
        rls.scoped(session, admin, AuthUser)


def test_anonymous_caller_is_rejected(session):
    with pytest.raises(PolicyViolation):
        rls.scoped(session, None, Project)
    assert not rls.can(session, None, "insert", Project(name="x", start_date="2026-01-01",
                                                          deadline="2026-01-02", created_by="x"))


def test_member_cannot_touch_someone_elses_project(session, admin, member, project_data):
    p = projects.create_project(session, admin, project_data)
    with pytest.raises(PolicyViolation):
        projects.update_project(session, member, p["id"], {"name": "Hijacked"})
    with pytest.raises(PolicyViolation):
        projects.delete_project(session, member, p["id"])
    assert projects.get_project(session, admin, p["id"])["name"] == "Website Relaunch"


def test_admin_overrides_owner_rule(session, admin, member, project_data):
    p = projects.create_project(session, member, project_data)
    updated = projects.update_project(session, admin, p["id"], {"status": "completed"})
    assert updated["status"] == "completed"
    notes_row = notes.create_note(session, member, {"content": "member note"})
    notes.delete_note(session, admin, notes_row["id"])
    assert notes.list_notes(session, admin) == []


def test_insert_requires_matching_owner(session, admin, member):
    row = Project(name="x", start_date="2026-01-01", deadline="2026-01-02", created_by=admin.user_id)
    assert not rls.can(session, member, "insert", row)
    assert rls.can(session, admin, "insert", row)


def test_member_reads_no_finance_rows(session, admin, member, project_data):
    p = projects.create_project(session, admin, project_data)
    finance.create_finance_record(session, admin, {"type": "income", "amount": "50", "project_id": p["id"]})
    assert len(finance.list_finance_records(session, admin)) == 1
    assert finance.list_finance_records(session, member) == []


def test_member_cannot_write_finance(session, admin, member, project_data):
    p = projects.create_project(session, admin, project_data)
    with pytest.raises(PolicyViolation):
        finance.create_finance_record(session, member, {"type": "expense", "amount": "10", "project_id": p["id"]})


def test_member_cannot_raise_own_role(session, member):
    with pytest.raises(PolicyViolation):
        team.change_role(session, member, member.user_id, "admin")
    session.rollback()
    assert not has_role(session, member.user_id, AppRole.admin)


def test_profile_update_rules(session, admin, member, other_member):
    assert profiles.update_profile(session, member, member.user_id, {"full_name": "Max M."})["full_name"] == "Max M."
    with pytest.raises(PolicyViolation):
        profiles.update_profile(session, member, other_member.user_id, {"full_name": "Nope"})
    assert profiles.update_profile(session, admin, other_member.user_id, {"full_name": "Olga O."})["full_name"] == "Olga O."


def test_profile_edit_round_trip(session, member, other_member):
    current = profiles.get_profile(session, member, member.user_id)
    assert current["full_name"] == "Max Member"
    assert current["avatar_url"] is None
    assert profiles.get_profile(session, member, other_member.user_id)["full_name"] == "Olga Other"

    patch = changed_fields(current, {"full_name": "Max Member", "avatar_url": "https://img.example.com/max.png"})
    assert patch == {"avatar_url": "https://img.example.com/max.png"}
    profiles.update_profile(session, member, member.user_id, patch)
    assert profiles.get_profile(session, member, member.user_id)["avatar_url"] == "https://img.example.com/max.png"
