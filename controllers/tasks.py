# controllers/tasks.py
"""Tasks: list with project names, create, patch, status moves, delete."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from controllers.base import (
    apply_patch, delete_row, get_visible, insert_row, optional_text, parse_choice,
    parse_day, require_text, to_dict,
)
from models import Note, Project, Task, TaskStatus
from rls import Caller, authorize, scoped

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    TaskStatus.todo.value: "To Do",
    TaskStatus.in_progress.value: "In Progress",
    TaskStatus.done.value: "Done",
}


def _project_id(session: Session, caller: Caller):
    def parse(value):
        value = optional_text(value)
        if value is not None:
            get_visible(session, caller, Project, value)
        return value
    return parse


def _editable(session: Session, caller: Caller):
    return {
        "title": lambda v: require_text(v, "title", "Title"),
        "description": optional_text,
        "status": lambda v: parse_choice(TaskStatus, v, "status"),
        "deadline": lambda v: parse_day(v, "deadline", required=False),
        "project_id": _project_id(session, caller),
        "assigned_to": optional_text,
    }


def list_tasks(session: Session, caller: Caller, project_id: Optional[str] = None,
               status: Optional[str] = None) -> List[Dict[str, Any]]:
    stmt = scoped(session, caller, Task, select(Task, Project.name).outerjoin(Project, Task.project_id == Project.id))
    if project_id:
        stmt = stmt.where(Task.project_id == project_id)
    if status:
        stmt = stmt.where(Task.status == parse_choice(TaskStatus, status, "status"))
    out = []
    for task, project_name in session.exec(stmt.order_by(Task.created_at.desc())).all():
        row = to_dict(task)
        row["project_name"] = project_name
        out.append(row)
    return out


def get_task(session: Session, caller: Caller, task_id: str) -> Dict[str, Any]:
    return to_dict(get_visible(session, caller, Task, task_id))


def create_task(session: Session, caller: Caller, data: Dict[str, Any]) -> Dict[str, Any]:
    """New tasks start out assigned to whoever created them."""
    title = require_text(data.get("title"), "title", "Title")
    status = parse_choice(TaskStatus, data.get("status") or TaskStatus.todo, "status")
    deadline = parse_day(data.get("deadline"), "deadline", required=False)
    project_id = _project_id(session, caller)(data.get("project_id"))

    task = insert_row(session, caller, Task(
        title=title,
        description=optional_text(data.get("description")),
        status=status,
        deadline=deadline,
        project_id=project_id,
        assigned_to=caller.user_id,
        created_by=caller.user_id,
    ))
    logger.info("Task %s created by %s", task.id, caller.user_id)
    return to_dict(task)


def update_task(session: Session, caller: Caller, task_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    task = get_visible(session, caller, Task, task_id)
    return to_dict(apply_patch(session, caller, task, patch, _editable(session, caller)))


def set_task_status(session: Session, caller: Caller, task_id: str, status: str) -> Dict[str, Any]:
    """Any status may move to any other."""
    return update_task(session, caller, task_id, {"status": status})


def delete_task(session: Session, caller: Caller, task_id: str) -> None:
    task = get_visible(session, caller, Task, task_id)
    authorize(session, caller, "delete", task)
    for note in session.exec(select(Note).where(Note.task_id == task_id)).all():
        note.task_id = None
        session.add(note)
    session.flush()
    delete_row(session, caller, task)
    logger.info("Task %s deleted by %s", task_id, caller.user_id)
