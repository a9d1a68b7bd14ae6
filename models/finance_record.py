# models/finance_record.py
import datetime as dt
from sqlmodel import SQLModel, Field
from typing import Optional

from models.base import new_id, utcnow
from models.enums import FinanceType


class FinanceRecord(SQLModel, table=True):
    __tablename__ = "finance_records"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    type: FinanceType
    amount: float
    description: Optional[str] = None
    date: dt.date = Field(default_factory=lambda: utcnow().date(), index=True)
    project_id: str = Field(foreign_key="projects.id", index=True)
    created_by: str = Field(index=True)
    created_at: dt.datetime = Field(default_factory=utcnow)
