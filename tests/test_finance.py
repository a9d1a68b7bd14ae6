# tests/test_finance.py
from datetime import date, timedelta

import pytest

from controllers import finance, payments, projects
from controllers.base import changed_fields
from controllers.finance import DateFilter
from errors import FormValidationError, RecordNotFound

TODAY = date(2026, 6, 15)


@pytest.fixture
def project(session, admin, project_data):
    return projects.create_project(session, admin, project_data)


def _record(session, admin, project, days_ago, amount="10", kind="income"):
    return finance.create_finance_record(session, admin, {
        "type": kind, "amount": amount, "project_id": project["id"],
        "date": TODAY - timedelta(days=days_ago), "description": f"{days_ago} days ago",
    })


def _days(rows):
    return sorted((TODAY - r["date"]).days for r in rows)


def test_rolling_windows(session, admin, project):
    for days_ago in (0, 1, 7, 8, 30, 31):
        _record(session, admin, project, days_ago)

    def listed(f):
        return _days(finance.list_finance_records(session, admin, f, today=TODAY))

    assert listed(DateFilter.all) == [0, 1, 7, 8, 30, 31]
    assert listed(DateFilter.daily) == [0]
    assert listed(DateFilter.weekly) == [0, 1, 7]
    assert listed("monthly") == [0, 1, 7, 8, 30]


def test_unknown_filter_rejected(session, admin):
    with pytest.raises(FormValidationError):
        finance.list_finance_records(session, admin, "yearly")


def test_filter_labels():
    assert [f.label for f in DateFilter] == ["All Time", "Today", "Last 7 Days", "Last 30 Days"]


def test_listing_is_newest_first_with_project_name(session, admin, project):
    _record(session, admin, project, 3)
    _record(session, admin, project, 0)
    _record(session, admin, project, 9)
    rows = finance.list_finance_records(session, admin, today=TODAY)
    assert [(TODAY - r["date"]).days for r in rows] == [0, 3, 9]
    assert {r["project_name"] for r in rows} == {"Website Relaunch"}


def test_amount_is_parsed_as_float(session, admin, project):
    r = _record(session, admin, project, 0, amount="12.5")
    assert r["amount"] == 12.5
    with pytest.raises(FormValidationError):
        _record(session, admin, project, 0, amount="twelve")


def test_project_is_required(session, admin):
    with pytest.raises(FormValidationError) as exc:
        finance.create_finance_record(session, admin, {"type": "income", "amount": "5"})
    assert exc.value.field == "project_id"


def test_date_defaults_to_today(session, admin, project):
    r = finance.create_finance_record(session, admin, {"type": "expense", "amount": "5", "project_id": project["id"]})
    assert r["date"] == finance.utc_today()


def test_update_and_delete(session, admin, project):
    r = _record(session, admin, project, 2)
    assert finance.update_finance_record(session, admin, r["id"], {"type": "expense"})["type"] == "expense"
    finance.delete_finance_record(session, admin, r["id"])
    assert finance.list_finance_records(session, admin) == []


def test_payments_newest_first(session, admin, project):
    payments.create_payment(session, admin, {"amount": "100", "payment_date": "2026-02-01", "project_id": project["id"]})
    payments.create_payment(session, admin, {"amount": "250", "payment_date": "2026-04-01", "project_id": project["id"],
                                             "payment_method": "Wire"})
    rows = payments.list_payments(session, admin, project_id=project["id"])
    assert [r["amount"] for r in rows] == [250.0, 100.0]
    assert rows[0]["payment_method"] == "Wire"
    assert rows[0]["project_name"] == "Website Relaunch"


def test_payment_edit_and_delete(session, admin, project):
    pay = payments.create_payment(session, admin, {"amount": "100", "payment_date": "2026-02-01",
                                                   "project_id": project["id"]})
    patch = changed_fields(pay, {"amount": 120.0, "payment_date": date(2026, 2, 1),
                                 "payment_method": "Card", "notes": ""})
    assert patch == {"amount": 120.0, "payment_method": "Card"}
    updated = payments.update_payment(session, admin, pay["id"], patch)
    assert updated["amount"] == 120.0
    assert updated["payment_method"] == "Card"
    assert updated["payment_date"] == date(2026, 2, 1)

    payments.delete_payment(session, admin, pay["id"])
    assert payments.list_payments(session, admin, project_id=project["id"]) == []


def test_members_cannot_touch_payments(session, admin, member, project):
    pay = payments.create_payment(session, admin, {"amount": "100", "project_id": project["id"]})
    with pytest.raises(RecordNotFound):
        payments.update_payment(session, member, pay["id"], {"amount": "1"})
    with pytest.raises(RecordNotFound):
        payments.delete_payment(session, member, pay["id"])
    assert payments.list_payments(session, admin)[0]["amount"] == 100.0
