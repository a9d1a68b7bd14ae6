# tests/test_navigation.py
import pytest

from navigation import nav_items, resolve


def test_member_sidebar_hides_admin_pages():
    pages = [i.page for i in nav_items(is_admin=False)]
    assert pages == ["dashboard", "projects", "tasks", "notes", "reports"]


def test_admin_sidebar_has_everything():
    pages = [i.page for i in nav_items(is_admin=True)]
    assert "finance" in pages and "team" in pages


@pytest.mark.parametrize("page", ["landing", "auth", "forgot-password", "reset-password"])
def test_public_pages_need_no_session(page):
    assert resolve(page, authenticated=False, is_admin=False).kind == "public"


def test_signed_in_users_skip_sign_in_screen():
    route = resolve("auth", authenticated=True, is_admin=False)
    assert (route.kind, route.page) == ("page", "dashboard")


def test_protected_page_redirects_to_sign_in():
    route = resolve("projects", authenticated=False, is_admin=False)
    assert (route.kind, route.page) == ("redirect", "auth")


def test_admin_pages_denied_to_members():
    assert resolve("finance", authenticated=True, is_admin=False).kind == "denied"
    assert resolve("team", authenticated=True, is_admin=True).kind == "page"


def test_unknown_page_is_not_found():
    assert resolve("nowhere", authenticated=True, is_admin=True).kind == "not-found"


def test_default_pages():
    assert resolve(None, authenticated=False, is_admin=False).page == "landing"
    assert resolve("", authenticated=True, is_admin=False).page == "dashboard"


def test_waits_while_loading():
    assert resolve("dashboard", authenticated=False, is_admin=False, loading=True).kind == "loading"
