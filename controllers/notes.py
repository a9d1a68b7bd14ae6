# controllers/notes.py
"""Notes with their author's display name."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from controllers.base import (
    apply_patch, delete_row, get_visible, insert_row, optional_text, require_text, to_dict,
)
from models import Note, Profile, Project, Task
from rls import Caller, scoped

logger = logging.getLogger(__name__)


def _parent(session: Session, caller: Caller, model):
    def parse(value):
        value = optional_text(value)
        if value is not None:
            get_visible(session, caller, model, value)
        return value
    return parse


def _mentions(value) -> Optional[List[str]]:
    if not value:
        return None
    return [str(v) for v in value]


def _editable(session: Session, caller: Caller):
    return {
        "content": lambda v: require_text(v, "content", "Note"),
        "project_id": _parent(session, caller, Project),
        "task_id": _parent(session, caller, Task),
        "mentioned_users": _mentions,
    }


def list_notes(session: Session, caller: Caller, project_id: Optional[str] = None) -> List[Dict[str, Any]]:
    stmt = scoped(session, caller, Note, select(Note, Profile.full_name).outerjoin(Profile, Note.created_by == Profile.id))
    if project_id:
        stmt = stmt.where(Note.project_id == project_id)
    out = []
    for note, author in session.exec(stmt.order_by(Note.created_at.desc())).all():
        row = to_dict(note)
        row["author_name"] = author or "Unknown"
        out.append(row)
    return out


def create_note(session: Session, caller: Caller, data: Dict[str, Any]) -> Dict[str, Any]:
    fields = _editable(session, caller)
    content = fields["content"](data.get("content"))
    note = Note(
        content=content,
        project_id=fields["project_id"](data.get("project_id")),
        task_id=fields["task_id"](data.get("task_id")),
        mentioned_users=_mentions(data.get("mentioned_users")),
        created_by=caller.user_id,
    )
    note = insert_row(session, caller, note)
    logger.info("Note %s created by %s", note.id, caller.user_id)
    return to_dict(note)


def update_note(session: Session, caller: Caller, note_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    note = get_visible(session, caller, Note, note_id)
    return to_dict(apply_patch(session, caller, note, patch, _editable(session, caller)))


def delete_note(session: Session, caller: Caller, note_id: str) -> None:
    delete_row(session, caller, get_visible(session, caller, Note, note_id))
