# tests/test_team.py
import pytest
from sqlmodel import select

from controllers import team
from errors import AppError, FunctionAuthorizationError, FunctionCallError, PolicyViolation
from models import AppRole, AuthUser
from rls import has_role


class FakeClient:
    def __init__(self, users=None, error=None):
        self.users = users
        self.error = error
        self.deleted = []

    def list_users(self):
        if self.error:
            raise self.error
        return self.users

    def delete_user(self, user_id):
        if self.error:
            raise self.error
        self.deleted.append(user_id)
        return True


def test_privileged_listing_wins(session, admin):
    users = [{"id": "u1", "email": "a@b.c", "full_name": "A", "role": "admin", "created_at": None}]
    assert team.fetch_team(session, admin, FakeClient(users=users)) == users


def test_falls_back_to_profiles_on_refusal(session, admin, member):
    client = FakeClient(error=FunctionAuthorizationError("Unauthorized - admin required", 403))
    rows = {r["id"]: r for r in team.fetch_team(session, member, client)}
    assert set(rows) == {admin.user_id, member.user_id}
    assert rows[admin.user_id]["role"] == "admin"
    assert rows[member.user_id]["full_name"] == "Max Member"
    assert {r["email"] for r in rows.values()} == {"Hidden"}


def test_other_errors_propagate(session, admin):
    with pytest.raises(FunctionCallError):
        team.fetch_team(session, admin, FakeClient(error=FunctionCallError("boom", 500)))


def test_delete_member(session):
    client = FakeClient()
    assert team.delete_member(client, "u9") is True
    assert client.deleted == ["u9"]


def test_delete_member_refused_message():
    client = FakeClient(error=FunctionAuthorizationError("Unauthorized", 401))
    with pytest.raises(AppError, match="Unable to delete user. This requires admin privileges."):
        team.delete_member(client, "u9")


def test_admin_changes_role(session, admin, member):
    assert team.change_role(session, admin, member.user_id, "admin") == {"user_id": member.user_id, "role": "admin"}
    assert has_role(session, member.user_id, AppRole.admin)
    team.change_role(session, admin, member.user_id, "member")
    assert not has_role(session, member.user_id, AppRole.admin)


def test_invite_member(session, admin):
    created = team.invite_member(session, admin, "new@example.com", "secret123", "Nia New", role="admin")
    assert created["email"] == "new@example.com"
    assert has_role(session, created["id"], AppRole.admin)


def test_member_cannot_invite(session, member):
    with pytest.raises(PolicyViolation):
        team.invite_member(session, member, "sneaky@example.com", "secret123")
    assert session.exec(select(AuthUser).where(AuthUser.email == "sneaky@example.com")).first() is None
