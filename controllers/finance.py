# controllers/finance.py
"""
Finance records (admin only under the row policies).

Date filters are rolling windows counted back from today's UTC date:
daily keeps today, weekly the last 7 days and monthly the last 30, each
with an inclusive lower bound.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import true
from sqlmodel import Session, select

from controllers.base import (
    apply_patch, delete_row, get_visible, insert_row, optional_text, parse_amount,
    parse_choice, parse_day, require_text, to_dict,
)
from models import FinanceRecord, FinanceType, Project
from models.base import utcnow
from rls import Caller, scoped

logger = logging.getLogger(__name__)


class DateFilter(str, Enum):
    all = "all"
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"

    @property
    def label(self) -> str:
        return {"all": "All Time", "daily": "Today", "weekly": "Last 7 Days", "monthly": "Last 30 Days"}[self.value]


_WINDOW_DAYS = {DateFilter.weekly: 7, DateFilter.monthly: 30}


def utc_today() -> date:
    return utcnow().date()


def date_window_clause(date_filter: DateFilter | str, today: Optional[date] = None):
    """WHERE clause on FinanceRecord.date for one filter choice."""
    date_filter = parse_choice(DateFilter, date_filter, "date_filter")
    today = today or utc_today()
    if date_filter is DateFilter.daily:
        return FinanceRecord.date == today
    if date_filter in _WINDOW_DAYS:
        return FinanceRecord.date >= today - timedelta(days=_WINDOW_DAYS[date_filter])
    return true()


def _project_id(session: Session, caller: Caller):
    def parse(value):
        value = require_text(value, "project_id", "Project")
        get_visible(session, caller, Project, value)
        return value
    return parse


def _editable(session: Session, caller: Caller):
    return {
        "type": lambda v: parse_choice(FinanceType, v, "type"),
        "amount": lambda v: parse_amount(v, "amount"),
        "description": optional_text,
        "date": lambda v: parse_day(v, "date"),
        "project_id": _project_id(session, caller),
    }


def list_finance_records(session: Session, caller: Caller, date_filter: DateFilter | str = DateFilter.all,
                         today: Optional[date] = None) -> List[Dict[str, Any]]:
    stmt = scoped(session, caller, FinanceRecord,
                  select(FinanceRecord, Project.name).outerjoin(Project, FinanceRecord.project_id == Project.id))
    stmt = stmt.where(date_window_clause(date_filter, today))
    out = []
    rows = session.exec(stmt.order_by(FinanceRecord.date.desc(), FinanceRecord.created_at.desc())).all()
    for record, project_name in rows:
        row = to_dict(record)
        row["project_name"] = project_name
        out.append(row)
    return out


def create_finance_record(session: Session, caller: Caller, data: Dict[str, Any]) -> Dict[str, Any]:
    kind = parse_choice(FinanceType, data.get("type"), "type")
    amount = parse_amount(data.get("amount"), "amount")
    day = parse_day(data.get("date"), "date", required=False) or utc_today()
    record = FinanceRecord(
        type=kind,
        amount=amount,
        description=optional_text(data.get("description")),
        date=day,
        project_id=_project_id(session, caller)(data.get("project_id")),
        created_by=caller.user_id,
    )
    record = insert_row(session, caller, record)
    logger.info("Finance record %s created by %s", record.id, caller.user_id)
    return to_dict(record)


def update_finance_record(session: Session, caller: Caller, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    record = get_visible(session, caller, FinanceRecord, record_id)
    return to_dict(apply_patch(session, caller, record, patch, _editable(session, caller)))


def delete_finance_record(session: Session, caller: Caller, record_id: str) -> None:
    delete_row(session, caller, get_visible(session, caller, FinanceRecord, record_id))
