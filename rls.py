# rls.py
"""
Row-level access policies.

Every table gets a TablePolicy with one rule per operation. Read rules turn
into SQL WHERE clauses, so filtering happens in the query. Write rules are
checked against the concrete row before the statement is issued. Page
controllers never touch a table except through `scoped` and `authorize`.

Two building blocks cover every write rule:

* owner write     -- the row's created_by is the caller
* admin override  -- the caller holds the admin role (has_role)

Role checks in the UI are rendering hints only; this module and the
functions service are where access is actually decided.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from sqlalchemy import false, true
from sqlmodel import Session, select

from errors import PolicyViolation
from models import (
    AppRole, FinanceRecord, Note, Payment, Profile, Project, Task, UserRole,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """The identity a query runs as."""
    user_id: str


def has_role(session: Session, user_id: str, role: AppRole | str) -> bool:
    """True when `user_id` holds `role`. Single source of truth for roles."""
    if not user_id:
        return False
    try:
        role = AppRole(role)
    except ValueError:
        return False
    stmt = select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == role)
    return session.exec(stmt).first() is not None


ReadRule = Callable[[Session, Caller, type], object]
WriteRule = Callable[[Session, Caller, object], bool]


# ---- read rules (return a WHERE clause) ----
def any_authenticated(session: Session, caller: Caller, model: type):
    return true()


def admin_read(session: Session, caller: Caller, model: type):
    return true() if has_role(session, caller.user_id, AppRole.admin) else false()


# ---- write rules (return a bool for one row) ----
def owner(session: Session, caller: Caller, row) -> bool:
    return getattr(row, "created_by", None) == caller.user_id


def admin(session: Session, caller: Caller, row) -> bool:
    return has_role(session, caller.user_id, AppRole.admin)


def own_profile(session: Session, caller: Caller, row) -> bool:
    return getattr(row, "id", None) == caller.user_id


def nobody(session: Session, caller: Caller, row) -> bool:
    return False


def either(*rules: WriteRule) -> WriteRule:
    def _rule(session: Session, caller: Caller, row) -> bool:
        return any(r(session, caller, row) for r in rules)
    return _rule


@dataclass(frozen=True)
class TablePolicy:
    select: ReadRule
    insert: WriteRule
    update: WriteRule
    delete: WriteRule


_owner_or_admin = either(owner, admin)

POLICIES: Dict[str, TablePolicy] = {
    Project.__tablename__: TablePolicy(any_authenticated, owner, _owner_or_admin, _owner_or_admin),
    Task.__tablename__: TablePolicy(any_authenticated, owner, _owner_or_admin, _owner_or_admin),
    Note.__tablename__: TablePolicy(any_authenticated, owner, _owner_or_admin, _owner_or_admin),
    FinanceRecord.__tablename__: TablePolicy(admin_read, admin, admin, admin),
    Payment.__tablename__: TablePolicy(admin_read, admin, admin, admin),
    # rows are created by sign-up and removed with the identity
    Profile.__tablename__: TablePolicy(any_authenticated, nobody, either(own_profile, admin), nobody),
    # members must never be able to raise their own role
    UserRole.__tablename__: TablePolicy(any_authenticated, admin, admin, admin),
}


def policy_for(model: type) -> TablePolicy:
    table = getattr(model, "__tablename__", model.__name__)
    policy = POLICIES.get(table)
    if policy is None:
        logger.error("No row-level policy registered for %s", table)
        raise PolicyViolation(table, "access")
    return policy


def _require_caller(caller: Optional[Caller], table: str, action: str) -> Caller:
    if caller is None or not caller.user_id:
        raise PolicyViolation(table, action)
    return caller


def scoped(session: Session, caller: Optional[Caller], model: type, stmt=None):
    """Restrict a SELECT on `model` to the rows `caller` may read."""
    caller = _require_caller(caller, model.__tablename__, "read")
    if stmt is None:
        stmt = select(model)
    return stmt.where(policy_for(model).select(session, caller, model))


def can(session: Session, caller: Optional[Caller], action: str, row) -> bool:
    if caller is None or not caller.user_id:
        return False
    rule = getattr(policy_for(type(row)), action)
    return bool(rule(session, caller, row))


def authorize(session: Session, caller: Optional[Caller], action: str, row) -> None:
    """Raise PolicyViolation unless `caller` may `action` this row."""
    table = type(row).__tablename__
    if not can(session, caller, action, row):
        logger.warning("Policy rejected %s on %s for %s", action, table,
                       caller.user_id if caller else "anonymous")
        raise PolicyViolation(table, action)
