# models/profile.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from models.base import utcnow


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"
    __table_args__ = {"extend_existing": True}

    # same id as the auth identity
    id: str = Field(primary_key=True, foreign_key="auth_users.id")
    full_name: str
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
