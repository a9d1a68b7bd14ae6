# tests/test_functions.py
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

import config
import db
from conftest import token_for
from functions.app import app
from functions.common import get_db_session
from functions import mailer
from models import AuthUser

MANAGE = "/functions/v1/manage-users"
RESET = "/functions/v1/send-reset-email"


@pytest.fixture
def client(engine):
    def _session():
        with db.get_session(engine) as s:
            yield s

    app.dependency_overrides[get_db_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


class TestManageUsers:
    def test_missing_token(self, client):
        resp = client.post(MANAGE, json={"action": "listUsers"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "No authorization header"}

    def test_invalid_token(self, client):
        resp = client.post(MANAGE, json={"action": "listUsers"}, headers=_auth("garbage"))
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    def test_member_is_forbidden(self, client, session, member):
        resp = client.post(MANAGE, json={"action": "listUsers"}, headers=_auth(token_for(session, member)))
        assert resp.status_code == 403
        assert "admin" in resp.json()["error"]

    def test_list_users(self, client, session, admin, member):
        resp = client.post(MANAGE, json={"action": "listUsers"}, headers=_auth(token_for(session, admin)))
        assert resp.status_code == 200
        users = {u["email"]: u for u in resp.json()["users"]}
        assert set(users) == {"ada@example.com", "max@example.com"}
        assert users["ada@example.com"]["role"] == "admin"
        assert users["max@example.com"]["role"] == "member"
        assert users["max@example.com"]["full_name"] == "Max Member"
        assert set(users["max@example.com"]) == {"id", "email", "full_name", "role", "created_at"}

    def test_delete_user(self, client, session, admin, member):
        token = token_for(session, admin)
        resp = client.post(MANAGE, json={"action": "deleteUser", "userId": member.user_id}, headers=_auth(token))
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        session.expire_all()
        assert session.exec(select(AuthUser).where(AuthUser.id == member.user_id)).first() is None

        resp = client.post(MANAGE, json={"action": "deleteUser", "userId": member.user_id}, headers=_auth(token))
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    @pytest.mark.parametrize("body", [{"action": "dropTables"}, {"action": "deleteUser"}])
    def test_invalid_action(self, client, session, admin, body):
        resp = client.post(MANAGE, json=body, headers=_auth(token_for(session, admin)))
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid action"}

    def test_token_checked_before_body(self, client):
        resp = client.post(MANAGE, json={})
        assert resp.status_code == 401


class TestSendResetEmail:
    @pytest.fixture(autouse=True)
    def api_key(self, monkeypatch):
        monkeypatch.setattr(config, "RESEND_API_KEY", "re_test_key")

    def test_sends_rendered_template(self, client):
        provider = MagicMock(ok=True, status_code=200)
        provider.json.return_value = {"id": "email_123"}
        link = "http://localhost:8501/?page=reset-password&token=abc"
        with patch.object(mailer.requests, "post", return_value=provider) as post:
            resp = client.post(RESET, json={"email": "max@example.com", "resetLink": link})
        assert resp.status_code == 200
        assert resp.json() == {"id": "email_123"}

        kwargs = post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
        assert kwargs["json"]["to"] == ["max@example.com"]
        assert kwargs["json"]["subject"] == "Reset your password"
        html = kwargs["json"]["html"]
        assert 'href="http://localhost:8501/?page=reset-password&amp;token=abc"' in html
        assert "If you didn't request this, you can safely ignore this email." in html

    def test_provider_failure_is_500(self, client):
        provider = MagicMock(ok=False, status_code=422)
        provider.json.return_value = {"message": "Invalid `to` field"}
        with patch.object(mailer.requests, "post", return_value=provider):
            resp = client.post(RESET, json={"email": "max@example.com", "resetLink": "http://x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Invalid `to` field"}

    def test_missing_api_key_is_500(self, client, monkeypatch):
        monkeypatch.setattr(config, "RESEND_API_KEY", "")
        resp = client.post(RESET, json={"email": "max@example.com", "resetLink": "http://x"})
        assert resp.status_code == 500
        assert "RESEND_API_KEY" in resp.json()["error"]

    def test_malformed_body_is_400(self, client):
        resp = client.post(RESET, json={"email": "not-an-email", "resetLink": "http://x"})
        assert resp.status_code == 400
        assert "error" in resp.json()
        resp = client.post(RESET, json={"email": "max@example.com"})
        assert resp.status_code == 400


def test_escapes_reset_link():
    html = mailer.render_reset_email('http://x/"><script>alert(1)</script>')
    assert "<script>" not in html
