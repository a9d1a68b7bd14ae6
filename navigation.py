# navigation.py
"""
Routes and the navigation gate.

Pages are addressed by the `?page=` query parameter. The gate only decides
what to render; the row policies and the server functions still check
every read and write on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

PUBLIC_PAGES = ("landing", "auth", "forgot-password", "reset-password")


@dataclass(frozen=True)
class NavItem:
    page: str
    label: str
    icon: str
    admin_only: bool = False


NAV_ITEMS: List[NavItem] = [
    NavItem("dashboard", "Dashboard", "📊"),
    NavItem("projects", "Projects", "📁"),
    NavItem("tasks", "Tasks", "✅"),
    NavItem("notes", "Notes", "📝"),
    NavItem("finance", "Finance", "💰", admin_only=True),
    NavItem("reports", "Reports", "📈"),
    NavItem("team", "Team", "👥", admin_only=True),
]

PROTECTED_PAGES = {item.page: item for item in NAV_ITEMS}


def nav_items(is_admin: bool) -> List[NavItem]:
    """Sidebar entries for this role; admin-only pages are left out for members."""
    return [item for item in NAV_ITEMS if is_admin or not item.admin_only]


@dataclass(frozen=True)
class Route:
    kind: str   # public | redirect | denied | not-found | page | loading
    page: str


def resolve(page: Optional[str], authenticated: bool, is_admin: bool, loading: bool = False) -> Route:
    """Decide what to render for `page`."""
    page = (page or "").strip().lower() or ("dashboard" if authenticated else "landing")
    if page in PUBLIC_PAGES:
        # signed-in users skip the landing and sign-in screens
        if authenticated and page in ("landing", "auth"):
            return Route("page", "dashboard")
        return Route("public", page)
    item = PROTECTED_PAGES.get(page)
    if item is None:
        return Route("not-found", page)
    if loading:
        return Route("loading", page)
    if not authenticated:
        return Route("redirect", "auth")
    if item.admin_only and not is_admin:
        return Route("denied", page)
    return Route("page", page)
