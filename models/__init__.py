# models/__init__.py
from .enums import AppRole, ProjectStatus, TaskStatus, FinanceType
from .auth_user import AuthUser, PasswordReset
from .profile import Profile
from .user_role import UserRole
from .project import Project
from .task import Task
from .note import Note
from .finance_record import FinanceRecord
from .payment import Payment
