# tests/conftest.py
import pytest
from sqlmodel import select

import auth
import db
from models import AppRole, AuthUser, UserRole
from rls import Caller


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(auth, "_PBKDF2_ROUNDS", 1000)


@pytest.fixture
def engine():
    eng = db.make_engine("sqlite://")
    db.init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with db.get_session(engine) as s:
        yield s


def make_user(session, email, full_name="", admin=False) -> Caller:
    user = auth.sign_up(session, email, "secret123", full_name)
    if admin:
        role = session.exec(select(UserRole).where(UserRole.user_id == user.id)).first()
        role.role = AppRole.admin
        session.add(role)
        session.commit()
    return Caller(user.id)


def token_for(session, caller: Caller) -> str:
    return auth.create_access_token(session.get(AuthUser, caller.user_id))


@pytest.fixture
def admin(session):
    return make_user(session, "ada@example.com", "Ada Admin", admin=True)


@pytest.fixture
def member(session):
    return make_user(session, "max@example.com", "Max Member")


@pytest.fixture
def other_member(session):
    return make_user(session, "olga@example.com", "Olga Other")


@pytest.fixture
def project_data():
    return {
        "name": "Website Relaunch",
        "description": "New marketing site",
        "start_date": "2026-01-05",
        "deadline": "2026-03-31",
        "status": "active",
        "client_name": "Acme Ltd",
        "total_amount": "1000",
        "amount_paid": "400",
    }
