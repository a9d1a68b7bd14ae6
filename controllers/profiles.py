# controllers/profiles.py
from __future__ import annotations

from typing import Any, Dict

from sqlmodel import Session

from controllers.base import apply_patch, get_visible, optional_text, require_text, to_dict
from models import Profile
from rls import Caller

EDITABLE = {
    "full_name": lambda v: require_text(v, "full_name", "Full name"),
    "avatar_url": optional_text,
}


def get_profile(session: Session, caller: Caller, user_id: str) -> Dict[str, Any]:
    return to_dict(get_visible(session, caller, Profile, user_id))


def update_profile(session: Session, caller: Caller, user_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Own profile, or any profile for admins."""
    profile = get_visible(session, caller, Profile, user_id)
    return to_dict(apply_patch(session, caller, profile, patch, EDITABLE))
