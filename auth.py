# auth.py
"""
Identities, access tokens, password resets and the per-browser session.

The access token is a signed JWT carrying the identity id. The Streamlit
app keeps it in its SessionContext and sends it as a bearer token to the
functions service, which re-verifies it with `get_user`.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from typing import Callable, Dict, Optional

import jwt
from sqlmodel import Session, select

import config
from errors import AuthError, FormValidationError
from functions_client import FunctionsClient
from models import AppRole, AuthUser, PasswordReset, Profile, UserRole
from models.base import as_utc, utcnow
from rls import Caller, has_role

logger = logging.getLogger(__name__)

_PBKDF2_ROUNDS = 200_000


# ---- passwords ----
def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ROUNDS)
    return f"pbkdf2_sha256${_PBKDF2_ROUNDS}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        _, rounds, salt, expected = stored.split("$")
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), int(rounds))
    return hmac.compare_digest(digest.hex(), expected)


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise FormValidationError("email", "Please enter a valid email address.")
    return email


def _check_password(password: str) -> None:
    if not password or len(password) < config.MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            "password", f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters."
        )


def _user_dict(session: Session, user: AuthUser) -> Dict:
    profile = session.get(Profile, user.id)
    return {
        "id": user.id,
        "email": user.email,
        "full_name": profile.full_name if profile else "User",
    }


# ---- identities ----
def sign_up(session: Session, email: str, password: str, full_name: str = "") -> AuthUser:
    """Create an identity together with its profile and a member role."""
    email = _normalize_email(email)
    _check_password(password)
    if session.exec(select(AuthUser).where(AuthUser.email == email)).first():
        raise AuthError("User already registered")

    user = AuthUser(email=email, password_hash=hash_password(password))
    session.add(user)
    session.flush()
    session.add(Profile(id=user.id, full_name=(full_name or "").strip() or email.split("@")[0]))
    session.add(UserRole(user_id=user.id, role=AppRole.member))
    session.commit()
    logger.info("New identity %s", user.id)
    return user


def create_access_token(user: AuthUser) -> str:
    now = utcnow()
    payload = {
        "sub": user.id,
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(minutes=config.ACCESS_TOKEN_MINUTES),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Session expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")


def sign_in(session: Session, email: str, password: str) -> Dict:
    """Return {"access_token", "user"} for valid credentials."""
    email = _normalize_email(email)
    if not password:
        raise FormValidationError("password", "Please enter your password.")
    user = session.exec(select(AuthUser).where(AuthUser.email == email)).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed sign-in for %s", email)
        raise AuthError("Invalid login credentials")
    user.last_sign_in_at = utcnow()
    session.add(user)
    session.commit()
    return {"access_token": create_access_token(user), "user": _user_dict(session, user)}


def get_user(session: Session, token: str) -> AuthUser:
    """Verify a bearer token and return the identity it belongs to."""
    if not token:
        raise AuthError("No authorization token")
    payload = decode_access_token(token)
    user = session.get(AuthUser, payload.get("sub") or "")
    if user is None:
        raise AuthError("Unauthorized")
    return user


def fetch_is_admin(session: Session, user_id: str) -> bool:
    """Admin flag for rendering; any lookup failure means not admin."""
    try:
        return has_role(session, user_id, AppRole.admin)
    except Exception as e:
        logger.warning("Role lookup failed for %s, treating as member: %s", user_id, e)
        return False


def delete_identity(session: Session, user_id: str) -> bool:
    """Remove an identity with its profile, roles and reset tokens."""
    user = session.get(AuthUser, user_id)
    if user is None:
        return False
    for model, column in ((UserRole, UserRole.user_id), (PasswordReset, PasswordReset.user_id)):
        for row in session.exec(select(model).where(column == user_id)).all():
            session.delete(row)
    profile = session.get(Profile, user_id)
    if profile:
        session.delete(profile)
    session.flush()
    session.delete(user)
    session.commit()
    logger.info("Deleted identity %s", user_id)
    return True


# ---- password reset ----
def reset_link_for(token: str) -> str:
    return f"{config.APP_URL}/?page=reset-password&token={token}"


def request_password_reset(session: Session, email: str,
                           send: Optional[Callable[[str, str], object]] = None) -> None:
    """Issue a single-use reset token and mail the link.

    Unknown addresses are accepted silently so the form does not reveal
    which emails are registered.
    """
    email = _normalize_email(email)
    user = session.exec(select(AuthUser).where(AuthUser.email == email)).first()
    if user is None:
        logger.info("Password reset requested for unknown email")
        return

    token = secrets.token_urlsafe(32)
    session.add(PasswordReset(
        user_id=user.id,
        token_hash=_hash_token(token),
        expires_at=utcnow() + timedelta(minutes=config.RESET_TOKEN_MINUTES),
    ))
    session.commit()

    if send is None:
        send = FunctionsClient().send_reset_email
    send(email, reset_link_for(token))


def reset_password(session: Session, token: str, new_password: str) -> None:
    _check_password(new_password)
    reset = session.exec(
        select(PasswordReset).where(PasswordReset.token_hash == _hash_token(token or ""))
    ).first()
    if reset is None or reset.used_at is not None or as_utc(reset.expires_at) < utcnow():
        raise AuthError("Reset link is invalid or has expired")
    user = session.get(AuthUser, reset.user_id)
    if user is None:
        raise AuthError("Reset link is invalid or has expired")
    user.password_hash = hash_password(new_password)
    reset.used_at = utcnow()
    session.add(user)
    session.add(reset)
    session.commit()
    logger.info("Password reset completed for %s", user.id)


# ---- per-browser session ----
class SessionContext:
    """Auth state for one browser session.

    Created at app start with loading=True, refreshed on every rerun and
    torn down by sign_out. `is_admin` only decides what gets rendered.
    """

    def __init__(self):
        self.user: Optional[Dict] = None
        self.access_token: Optional[str] = None
        self.is_admin = False
        self.loading = True

    @property
    def authenticated(self) -> bool:
        return self.user is not None and self.access_token is not None

    @property
    def caller(self) -> Optional[Caller]:
        return Caller(self.user["id"]) if self.user else None

    def establish(self, session: Session, result: Dict) -> None:
        """Adopt a fresh sign-in result, then resolve the role."""
        self.access_token = result["access_token"]
        self.user = result["user"]
        self.loading = True
        self.refresh(session)

    def refresh(self, session: Session) -> None:
        """Re-verify the token and re-read the role; loading ends after both."""
        if self.access_token:
            try:
                user = get_user(session, self.access_token)
            except AuthError as e:
                logger.info("Dropping session: %s", e)
                self._clear()
            else:
                self.user = _user_dict(session, user)
                self.is_admin = fetch_is_admin(session, user.id)
        else:
            self._clear()
        self.loading = False

    def sign_out(self) -> None:
        self._clear()
        self.loading = False

    def _clear(self) -> None:
        self.user = None
        self.access_token = None
        self.is_admin = False
