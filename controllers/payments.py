# controllers/payments.py
"""Payments received against a project (admin only under the row policies)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from controllers.base import (
    apply_patch, delete_row, get_visible, insert_row, optional_text, parse_amount,
    parse_day, require_text, to_dict,
)
from models import Payment, Project
from models.base import utcnow
from rls import Caller, scoped


def _project_id(session: Session, caller: Caller):
    def parse(value):
        value = require_text(value, "project_id", "Project")
        get_visible(session, caller, Project, value)
        return value
    return parse


def _editable(session: Session, caller: Caller):
    return {
        "amount": lambda v: parse_amount(v, "amount"),
        "payment_date": lambda v: parse_day(v, "payment_date"),
        "payment_method": optional_text,
        "notes": optional_text,
        "project_id": _project_id(session, caller),
    }


def list_payments(session: Session, caller: Caller, project_id: Optional[str] = None) -> List[Dict[str, Any]]:
    stmt = scoped(session, caller, Payment,
                  select(Payment, Project.name).outerjoin(Project, Payment.project_id == Project.id))
    if project_id:
        stmt = stmt.where(Payment.project_id == project_id)
    out = []
    for payment, project_name in session.exec(stmt.order_by(Payment.payment_date.desc())).all():
        row = to_dict(payment)
        row["project_name"] = project_name
        out.append(row)
    return out


def create_payment(session: Session, caller: Caller, data: Dict[str, Any]) -> Dict[str, Any]:
    amount = parse_amount(data.get("amount"), "amount")
    day = parse_day(data.get("payment_date"), "payment_date", required=False) or utcnow().date()
    payment = Payment(
        amount=amount,
        payment_date=day,
        payment_method=optional_text(data.get("payment_method")),
        notes=optional_text(data.get("notes")),
        project_id=_project_id(session, caller)(data.get("project_id")),
        created_by=caller.user_id,
    )
    return to_dict(insert_row(session, caller, payment))


def update_payment(session: Session, caller: Caller, payment_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    payment = get_visible(session, caller, Payment, payment_id)
    return to_dict(apply_patch(session, caller, payment, patch, _editable(session, caller)))


def delete_payment(session: Session, caller: Caller, payment_id: str) -> None:
    delete_row(session, caller, get_visible(session, caller, Payment, payment_id))
