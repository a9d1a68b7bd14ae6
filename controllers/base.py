# controllers/base.py
"""Form parsing and row helpers shared by the page controllers."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

from dateutil import parser
from sqlmodel import Session

from errors import FormValidationError, RecordNotFound
from models.base import utcnow
from rls import Caller, authorize, scoped


def require_text(value: Any, field: str, label: Optional[str] = None) -> str:
    text = str(value or "").strip()
    if not text:
        raise FormValidationError(field, f"{label or field.replace('_', ' ').capitalize()} is required.")
    return text


def optional_text(value: Any) -> Optional[str]:
    text = str(value or "").strip()
    return text or None


def parse_amount(value: Any, field: str, required: bool = True) -> Optional[float]:
    """Plain float parse, like the form's number inputs."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise FormValidationError(field, f"{field.replace('_', ' ').capitalize()} is required.")
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise FormValidationError(field, f"{field.replace('_', ' ').capitalize()} must be a number.")


def parse_day(value: Any, field: str, required: bool = True) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise FormValidationError(field, f"{field.replace('_', ' ').capitalize()} is required.")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parser.parse(str(value)).date()
    except (ValueError, OverflowError):
        raise FormValidationError(field, f"{field.replace('_', ' ').capitalize()} is not a valid date.")


def parse_choice(enum: Type[Enum], value: Any, field: str) -> Enum:
    try:
        return enum(getattr(value, "value", value))
    except ValueError:
        allowed = ", ".join(e.value for e in enum)
        raise FormValidationError(field, f"{field.capitalize()} must be one of: {allowed}.")


def to_dict(row) -> Dict[str, Any]:
    """Row -> plain dict with enum values unwrapped."""
    data = row.model_dump()
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}


def _comparable(value):
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.strip() or None
    return value


def changed_fields(current: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
    """The part of an edit form's `values` that differs from the `current` row dict.

    Blank text and None count as equal.
    """
    return {k: v for k, v in values.items() if _comparable(v) != _comparable(current.get(k))}


def get_visible(session: Session, caller: Caller, model, row_id: str):
    """Fetch one row through the read policy or raise RecordNotFound."""
    row = session.exec(scoped(session, caller, model).where(model.id == row_id)).first()
    if row is None:
        raise RecordNotFound(model.__tablename__, row_id)
    return row


def apply_patch(session: Session, caller: Caller, row, patch: Dict[str, Any],
                parsers: Dict[str, Callable[[Any], Any]]):
    """Set only the fields present in `patch`, then write the row back."""
    unknown = set(patch) - set(parsers)
    if unknown:
        raise FormValidationError(sorted(unknown)[0], f"Cannot edit {', '.join(sorted(unknown))}.")
    values = {field: parsers[field](value) for field, value in patch.items()}
    authorize(session, caller, "update", row)
    for field, value in values.items():
        setattr(row, field, value)
    if hasattr(row, "updated_at"):
        row.updated_at = utcnow()
    session.add(row)
    session.commit()
    return row


def delete_row(session: Session, caller: Caller, row) -> None:
    authorize(session, caller, "delete", row)
    session.delete(row)
    session.commit()


def insert_row(session: Session, caller: Caller, row):
    authorize(session, caller, "insert", row)
    session.add(row)
    session.commit()
    return row
