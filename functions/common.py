# functions/common.py
"""Errors and dependencies shared by the function endpoints."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

import auth
from db import get_session
from errors import AuthError
from models import AppRole, AuthUser
from rls import has_role

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our own 401 body
bearer = HTTPBearer(auto_error=False)


class FunctionError(Exception):
    """Turned into {"error": message} with `status_code` by the app."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def get_db_session() -> Iterator[Session]:
    """One session per invocation."""
    with get_session() as session:
        yield session


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    session: Session = Depends(get_db_session),
) -> AuthUser:
    """Re-verify the bearer token and the admin role on every call."""
    if credentials is None or not credentials.credentials:
        raise FunctionError("No authorization header", 401)
    try:
        user = auth.get_user(session, credentials.credentials)
    except AuthError as e:
        logger.info("Rejected token: %s", e)
        raise FunctionError("Unauthorized", 401)
    if not has_role(session, user.id, AppRole.admin):
        logger.warning("Non-admin %s called an admin function", user.id)
        raise FunctionError("Unauthorized - admin required", 403)
    return user
