# controllers/projects.py
"""Projects: list/search, detail, create, patch, delete with cascade."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from controllers.base import (
    apply_patch, get_visible, insert_row, optional_text, parse_amount,
    parse_choice, parse_day, require_text, to_dict,
)
from errors import FormValidationError
from models import FinanceRecord, Note, Payment, Project, ProjectStatus, Task
from rls import Caller, authorize, scoped

logger = logging.getLogger(__name__)

EDITABLE = {
    "name": lambda v: require_text(v, "name", "Project name"),
    "description": optional_text,
    "deliverables": optional_text,
    "start_date": lambda v: parse_day(v, "start_date"),
    "deadline": lambda v: parse_day(v, "deadline"),
    "status": lambda v: parse_choice(ProjectStatus, v, "status"),
    "client_name": optional_text,
    "client_email": optional_text,
    "client_phone": optional_text,
    "responsible_person": optional_text,
    "total_amount": lambda v: parse_amount(v, "total_amount", required=False),
    "amount_paid": lambda v: parse_amount(v, "amount_paid", required=False),
}


def _check_dates(start, deadline) -> None:
    if start and deadline and deadline < start:
        raise FormValidationError("deadline", "Deadline must be on or after the start date.")


def search_clause(term: str):
    """Case-insensitive substring match on name or description."""
    pattern = f"%{term.strip().lower()}%"
    return or_(func.lower(Project.name).like(pattern),
               func.lower(func.coalesce(Project.description, "")).like(pattern))


def list_projects(session: Session, caller: Caller, search: Optional[str] = None) -> List[Dict[str, Any]]:
    stmt = scoped(session, caller, Project)
    if search and search.strip():
        stmt = stmt.where(search_clause(search))
    rows = session.exec(stmt.order_by(Project.created_at.desc())).all()
    return [to_dict(p) for p in rows]


def project_options(session: Session, caller: Caller) -> Dict[str, str]:
    """name -> id, for select boxes."""
    rows = session.exec(scoped(session, caller, Project).order_by(Project.name)).all()
    return {p.name: p.id for p in rows}


def get_project(session: Session, caller: Caller, project_id: str) -> Dict[str, Any]:
    return to_dict(get_visible(session, caller, Project, project_id))


def create_project(session: Session, caller: Caller, data: Dict[str, Any]) -> Dict[str, Any]:
    values = {field: parse(data.get(field)) for field, parse in EDITABLE.items() if field in data}
    values["name"] = EDITABLE["name"](data.get("name"))
    values["start_date"] = EDITABLE["start_date"](data.get("start_date"))
    values["deadline"] = EDITABLE["deadline"](data.get("deadline"))
    _check_dates(values["start_date"], values["deadline"])
    values.setdefault("status", ProjectStatus.active)

    project = insert_row(session, caller, Project(**values, created_by=caller.user_id))
    logger.info("Project %s created by %s", project.id, caller.user_id)
    return to_dict(project)


def update_project(session: Session, caller: Caller, project_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    project = get_visible(session, caller, Project, project_id)
    start = parse_day(patch["start_date"], "start_date") if "start_date" in patch else project.start_date
    deadline = parse_day(patch["deadline"], "deadline") if "deadline" in patch else project.deadline
    _check_dates(start, deadline)
    return to_dict(apply_patch(session, caller, project, patch, EDITABLE))


def delete_project(session: Session, caller: Caller, project_id: str) -> None:
    """Hard delete. Finance records and payments go with it; tasks and notes are detached.

    The caller must be allowed to delete every cascaded finance record and
    payment, otherwise nothing is touched.
    """
    project = get_visible(session, caller, Project, project_id)
    authorize(session, caller, "delete", project)
    cascaded = []
    for model in (FinanceRecord, Payment):
        cascaded.extend(session.exec(select(model).where(model.project_id == project_id)).all())
    for row in cascaded:
        authorize(session, caller, "delete", row)

    for row in cascaded:
        session.delete(row)
    for model in (Task, Note):
        for row in session.exec(select(model).where(model.project_id == project_id)).all():
            row.project_id = None
            session.add(row)
    session.flush()
    session.delete(project)
    session.commit()
    logger.info("Project %s deleted by %s", project_id, caller.user_id)


def project_balance(project: Dict[str, Any]) -> float:
    """total_amount - amount_paid; may go negative."""
    return float(project.get("total_amount") or 0) - float(project.get("amount_paid") or 0)


def format_money(amount: float) -> str:
    return f"{amount:,.2f}"
