# models/auth_user.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from models.base import new_id, utcnow


class AuthUser(SQLModel, table=True):
    """Sign-in identity. Profile and role rows key off its id."""
    __tablename__ = "auth_users"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)
    last_sign_in_at: Optional[datetime] = None


class PasswordReset(SQLModel, table=True):
    __tablename__ = "password_resets"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="auth_users.id", index=True)
    token_hash: str = Field(index=True, unique=True)
    expires_at: datetime
    used_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
