# models/task.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

from models.base import new_id, utcnow
from models.enums import TaskStatus


class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    description: Optional[str] = None
    status: TaskStatus = Field(default=TaskStatus.todo)
    deadline: Optional[date] = None
    project_id: Optional[str] = Field(default=None, foreign_key="projects.id", index=True)
    assigned_to: Optional[str] = None
    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
