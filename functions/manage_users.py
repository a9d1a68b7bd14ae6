# functions/manage_users.py
"""POST /functions/v1/manage-users: list or delete auth identities (admins only)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session, select

import auth
from functions.common import FunctionError, get_db_session, require_admin
from models import AuthUser, Profile, UserRole

logger = logging.getLogger(__name__)

router = APIRouter()


class ManageUsersRequest(BaseModel):
    action: str
    userId: Optional[str] = None


def list_users(session: Session) -> List[Dict[str, Any]]:
    profiles = {p.id: p for p in session.exec(select(Profile)).all()}
    roles = {}
    for r in session.exec(select(UserRole)).all():
        roles.setdefault(r.user_id, r.role.value)
    users = []
    for u in session.exec(select(AuthUser).order_by(AuthUser.created_at)).all():
        profile = profiles.get(u.id)
        users.append({
            "id": u.id,
            "email": u.email or "N/A",
            "full_name": (profile.full_name if profile else None) or "User",
            "role": roles.get(u.id, "member"),
            "created_at": profile.created_at if profile else u.created_at,
        })
    return users


@router.post("/functions/v1/manage-users")
def manage_users(
    body: ManageUsersRequest,
    admin=Depends(require_admin),
    session: Session = Depends(get_db_session),
):
    if body.action == "listUsers":
        return {"users": list_users(session)}

    if body.action == "deleteUser" and body.userId:
        if not auth.delete_identity(session, body.userId):
            raise FunctionError("User not found", 404)
        logger.info("Admin %s deleted identity %s", admin.id, body.userId)
        return {"success": True}

    raise FunctionError("Invalid action", 400)
