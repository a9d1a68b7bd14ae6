# controllers/team.py
"""
Team page: members, roles, invites and user deletion.

Listing prefers the privileged `manage-users` function, which can see
emails. When that function refuses the caller, the page falls back to
profiles and roles it can read itself and shows "Hidden" for emails.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlmodel import Session, select

import auth
from controllers.base import parse_choice
from errors import AppError, FunctionAuthorizationError, PolicyViolation
from functions_client import FunctionsClient
from models import AppRole, Profile, UserRole
from rls import Caller, authorize, can, scoped

logger = logging.getLogger(__name__)

HIDDEN_EMAIL = "Hidden"
DELETE_DENIED = "Unable to delete user. This requires admin privileges."


def _fallback_team(session: Session, caller: Caller) -> List[Dict[str, Any]]:
    roles = {r.user_id: r.role.value for r in session.exec(scoped(session, caller, UserRole)).all()}
    profiles = session.exec(scoped(session, caller, Profile).order_by(Profile.created_at.desc())).all()
    return [{
        "id": p.id,
        "email": HIDDEN_EMAIL,
        "full_name": p.full_name or "User",
        "role": roles.get(p.id, AppRole.member.value),
        "created_at": p.created_at,
    } for p in profiles]


def fetch_team(session: Session, caller: Caller, client: FunctionsClient) -> List[Dict[str, Any]]:
    """Privileged listing first; the profile fallback only on an authorization refusal."""
    try:
        return client.list_users()
    except FunctionAuthorizationError as e:
        logger.info("listUsers refused (%s), using profiles", e)
        return _fallback_team(session, caller)


def change_role(session: Session, caller: Caller, user_id: str, role: str) -> Dict[str, Any]:
    role = parse_choice(AppRole, role, "role")
    row = session.exec(select(UserRole).where(UserRole.user_id == user_id)).first()
    if row is None:
        row = UserRole(user_id=user_id, role=role)
        authorize(session, caller, "insert", row)
    else:
        authorize(session, caller, "update", row)
        row.role = role
    session.add(row)
    session.commit()
    logger.info("Role of %s set to %s by %s", user_id, role.value, caller.user_id)
    return {"user_id": user_id, "role": role.value}


def invite_member(session: Session, caller: Caller, email: str, password: str,
                  full_name: str = "", role: str = AppRole.member.value) -> Dict[str, Any]:
    """Create an account on someone's behalf and give it the chosen role."""
    role = parse_choice(AppRole, role, "role")
    if not can(session, caller, "insert", UserRole(user_id="", role=role)):
        raise PolicyViolation(UserRole.__tablename__, "insert")
    user = auth.sign_up(session, email, password, full_name)
    if role is not AppRole.member:
        change_role(session, caller, user.id, role.value)
    return {"id": user.id, "email": user.email, "role": role.value}


def delete_member(client: FunctionsClient, user_id: str) -> bool:
    try:
        return client.delete_user(user_id)
    except FunctionAuthorizationError:
        raise AppError(DELETE_DENIED)
