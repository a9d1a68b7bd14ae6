# tests/test_projects.py
from datetime import date, timedelta

import pytest
from sqlmodel import select

import db
from controllers import finance, notes, payments, projects, tasks
from errors import FormValidationError, PolicyViolation, RecordNotFound
from models import FinanceRecord, Payment, Project
from models.base import as_utc


def test_create_and_refetch(session, admin, project_data):
    created = projects.create_project(session, admin, project_data)
    assert created["name"] == "Website Relaunch"
    assert created["start_date"] == date(2026, 1, 5)
    assert created["deadline"] == date(2026, 3, 31)
    assert created["status"] == "active"
    assert created["total_amount"] == 1000.0
    assert created["amount_paid"] == 400.0
    assert created["created_by"] == admin.user_id

    first = projects.get_project(session, admin, created["id"])
    second = projects.get_project(session, admin, created["id"])
    assert first == second == created


def test_status_defaults_to_active(session, admin, project_data):
    project_data.pop("status")
    assert projects.create_project(session, admin, project_data)["status"] == "active"


@pytest.mark.parametrize("field,value", [
    ("name", "   "),
    ("start_date", ""),
    ("deadline", "not a date"),
    ("status", "archived"),
    ("total_amount", "a lot"),
])
def test_validation_runs_before_insert(session, admin, project_data, field, value):
    project_data[field] = value
    with pytest.raises(FormValidationError) as exc:
        projects.create_project(session, admin, project_data)
    assert exc.value.field == field
    assert session.exec(select(Project)).all() == []


def test_deadline_before_start_rejected(session, admin, project_data):
    project_data["deadline"] = "2025-12-31"
    with pytest.raises(FormValidationError):
        projects.create_project(session, admin, project_data)


def test_search_is_case_insensitive_on_name_and_description(session, admin, project_data):
    projects.create_project(session, admin, project_data)
    projects.create_project(session, admin, dict(project_data, name="Mobile App", description="iOS build"))
    assert [p["name"] for p in projects.list_projects(session, admin, search="website")] == ["Website Relaunch"]
    assert [p["name"] for p in projects.list_projects(session, admin, search="IOS")] == ["Mobile App"]
    assert len(projects.list_projects(session, admin, search="")) == 2


def test_patch_only_touches_given_fields(session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    updated = projects.update_project(session, admin, p["id"], {"amount_paid": "1200"})
    assert updated["amount_paid"] == 1200.0
    assert updated["total_amount"] == 1000.0
    assert updated["name"] == p["name"]
    assert updated["updated_at"] >= p["updated_at"]


def test_unknown_patch_field_rejected(session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    with pytest.raises(FormValidationError):
        projects.update_project(session, admin, p["id"], {"created_by": "someone-else"})


def test_update_after_delete_is_not_found(session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    projects.delete_project(session, admin, p["id"])
    with pytest.raises(RecordNotFound):
        projects.update_project(session, admin, p["id"], {"name": "Ghost"})
    with pytest.raises(RecordNotFound):
        projects.delete_project(session, admin, p["id"])


def test_delete_cascades(session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    finance.create_finance_record(session, admin, {"type": "income", "amount": "100", "project_id": p["id"]})
    payments.create_payment(session, admin, {"amount": "100", "project_id": p["id"]})
    t = tasks.create_task(session, admin, {"title": "Wireframes", "project_id": p["id"]})
    n = notes.create_note(session, admin, {"content": "Kickoff done", "project_id": p["id"]})

    projects.delete_project(session, admin, p["id"])

    assert session.exec(select(FinanceRecord)).all() == []
    assert session.exec(select(Payment)).all() == []
    assert tasks.get_task(session, admin, t["id"])["project_id"] is None
    assert notes.list_notes(session, admin)[0]["id"] == n["id"]
    assert notes.list_notes(session, admin)[0]["project_id"] is None


def test_balance(session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    assert projects.format_money(projects.project_balance(p)) == "600.00"


def test_overpayment_gives_negative_balance(session, admin, project_data):
    p = projects.create_project(session, admin, dict(project_data, amount_paid="1250.5"))
    assert projects.project_balance(p) == pytest.approx(-250.5)


def test_project_options(session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    assert projects.project_options(session, admin) == {"Website Relaunch": p["id"]}


def test_member_cannot_cascade_delete_admin_finance(session, admin, member, project_data):
    p = projects.create_project(session, member, project_data)
    finance.create_finance_record(session, admin, {"type": "income", "amount": "500", "project_id": p["id"]})

    with pytest.raises(PolicyViolation):
        projects.delete_project(session, member, p["id"])

    session.rollback()
    rows = finance.list_finance_records(session, admin)
    assert [r["amount"] for r in rows] == [500.0]
    assert projects.get_project(session, member, p["id"])["id"] == p["id"]


def test_created_at_round_trips_as_utc(engine, session, admin, project_data):
    p = projects.create_project(session, admin, project_data)
    with db.get_session(engine) as fresh:
        row = fresh.get(Project, p["id"])
        created = as_utc(row.created_at)
    assert created.utcoffset() == timedelta(0)
    assert abs(created - p["created_at"]) < timedelta(seconds=1)
