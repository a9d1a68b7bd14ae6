# models/payment.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

from models.base import new_id, utcnow


class Payment(SQLModel, table=True):
    __tablename__ = "payments"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    amount: float
    payment_date: date = Field(default_factory=lambda: utcnow().date())
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    project_id: str = Field(foreign_key="projects.id", index=True)
    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
