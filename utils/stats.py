# utils/stats.py
"""Dashboard and report figures, reduced in Python over fetched rows."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from sqlmodel import Session

from controllers.finance import list_finance_records
from controllers.projects import list_projects
from controllers.tasks import list_tasks
from models import FinanceType, ProjectStatus, TaskStatus
from rls import Caller


def status_label(status: str) -> str:
    """in_progress -> 'in progress'."""
    return str(status).replace("_", " ")


def finance_totals(records: Iterable[Dict[str, Any]]) -> Dict[str, float]:
    income = sum(float(r["amount"] or 0) for r in records if r["type"] == FinanceType.income.value)
    expenses = sum(float(r["amount"] or 0) for r in records if r["type"] == FinanceType.expense.value)
    return {"income": income, "expenses": expenses, "profit": income - expenses}


def project_counts(projects: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = {"total": len(projects)}
    for status in ProjectStatus:
        counts[status.value] = sum(1 for p in projects if p["status"] == status.value)
    return counts


def task_counts(tasks: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "total": len(tasks),
        "pending": sum(1 for t in tasks if t["status"] != TaskStatus.done.value),
    }


def dashboard_stats(session: Session, caller: Caller, is_admin: bool) -> Dict[str, Any]:
    """Counts for everyone; income, expenses and profit for admins only.

    Members never query finance rows at all.
    """
    projects = list_projects(session, caller)
    tasks = list_tasks(session, caller)
    p = project_counts(projects)
    t = task_counts(tasks)
    stats: Dict[str, Any] = {
        "total_projects": p["total"],
        "active_projects": p[ProjectStatus.active.value],
        "ongoing_projects": p[ProjectStatus.ongoing.value],
        "completed_projects": p[ProjectStatus.completed.value],
        "total_tasks": t["total"],
        "pending_tasks": t["pending"],
        "finance": None,
    }
    if is_admin:
        stats["finance"] = finance_totals(list_finance_records(session, caller))
    return stats


def status_counts(rows: List[Dict[str, Any]], statuses: Optional[Iterable] = None) -> List[Dict[str, Any]]:
    """[{"status": label, "count": n}] in enum order, zero counts included."""
    statuses = [getattr(s, "value", s) for s in (statuses or sorted({r["status"] for r in rows}))]
    return [
        {"status": status_label(s), "count": sum(1 for r in rows if r["status"] == s)}
        for s in statuses
    ]


def report_data(session: Session, caller: Caller) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "projects": status_counts(list_projects(session, caller), ProjectStatus),
        "tasks": status_counts(list_tasks(session, caller), TaskStatus),
    }
