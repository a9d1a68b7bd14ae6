# models/enums.py
from enum import Enum


class AppRole(str, Enum):
    admin = "admin"
    member = "member"


class ProjectStatus(str, Enum):
    active = "active"
    ongoing = "ongoing"
    completed = "completed"


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class FinanceType(str, Enum):
    income = "income"
    expense = "expense"
