# models/project.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

from models.base import new_id, utcnow
from models.enums import ProjectStatus


class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    deliverables: Optional[str] = None
    start_date: date
    deadline: date
    status: ProjectStatus = Field(default=ProjectStatus.active)

    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    responsible_person: Optional[str] = None

    # independent figures; amount_paid may exceed total_amount
    total_amount: Optional[float] = 0.0
    amount_paid: Optional[float] = 0.0

    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
