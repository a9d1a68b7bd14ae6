# models/user_role.py
from sqlmodel import SQLModel, Field
from datetime import datetime

from models.base import new_id, utcnow
from models.enums import AppRole


class UserRole(SQLModel, table=True):
    __tablename__ = "user_roles"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="auth_users.id", index=True)
    role: AppRole = Field(default=AppRole.member)
    created_at: datetime = Field(default_factory=utcnow)
