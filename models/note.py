# models/note.py
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field
from typing import List, Optional
from datetime import datetime

from models.base import new_id, utcnow


class Note(SQLModel, table=True):
    __tablename__ = "notes"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    content: str
    project_id: Optional[str] = Field(default=None, foreign_key="projects.id")
    task_id: Optional[str] = Field(default=None, foreign_key="tasks.id")
    # stored for later use; nothing reads it yet
    mentioned_users: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
