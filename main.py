# main.py

#============================================================#
#                         Foundry-PM                         #
#============================================================#
# Purpose     : Foundry-PM is a project, task and finance    #
#               manager for founders and small teams, with   #
#               admin/member roles and row-level policies    #
#               (SQLite/Postgres powered)                    #
#------------------------------------------------------------#
# Run         : streamlit run main.py                        #
#               uvicorn functions.app:app --port 8000        #
#============================================================#

import streamlit as st

import config
import db
from controllers import profiles as profiles_ctl
from controllers.base import changed_fields
from navigation import nav_items, resolve
from ui.auth_panel import (
    get_session_context, render_auth, render_forgot_password, render_landing,
    render_reset_password, sign_out,
)
from ui.common import go, show_error
from ui.dashboard_panel import render_dashboard
from ui.finance_panel import render_finance
from ui.notes_panel import render_notes
from ui.projects_panel import render_projects
from ui.reports_panel import render_reports
from ui.tasks_panel import render_tasks
from ui.team_panel import render_team

st.set_page_config(
    page_title="Foundry-PM",
    page_icon="📁",
    layout="wide",
)

# ======================  GLOBAL CSS  ======================
st.markdown("""
<style>
:root{
  --tab-active:#2563eb;
  --tab-bg:#f6f7fb;
  --tab-text:#374151;
}
[data-testid="stSidebar"] .stButton button{
  width:100%; text-align:left; border-radius:999px; font-weight:600;
}
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def _init_db_once():
    config.configure_logging()
    db.init_db()
    return True

_init_db_once()

PUBLIC_RENDERERS = {
    "landing": render_landing,
    "auth": render_auth,
    "forgot-password": render_forgot_password,
    "reset-password": render_reset_password,
}

PAGE_RENDERERS = {
    "dashboard": render_dashboard,
    "projects": render_projects,
    "tasks": render_tasks,
    "notes": render_notes,
    "finance": render_finance,
    "reports": render_reports,
    "team": render_team,
}


def render_sidebar(ctx, current: str):
    with st.sidebar:
        st.markdown("### Foundry-PM")
        st.caption(f"Signed in as **{ctx.user['email']}**" + ("  ·  admin" if ctx.is_admin else ""))
        st.markdown("---")
        for item in nav_items(ctx.is_admin):
            label = f"{item.icon} {item.label}"
            if st.button(label, key=f"nav_{item.page}", type="primary" if item.page == current else "secondary"):
                go(item.page)
        st.markdown("---")
        with st.expander("My profile"):
            try:
                with db.get_session() as s:
                    profile = profiles_ctl.get_profile(s, ctx.caller, ctx.user["id"])
            except Exception as e:
                st.error(f"Loading profile failed: {e}")
                profile = None
            if profile is not None:
                with st.form("profile_form"):
                    full_name = st.text_input("Full name", value=profile.get("full_name") or "")
                    avatar_url = st.text_input("Avatar URL", value=profile.get("avatar_url") or "")
                    if st.form_submit_button("Save"):
                        patch = changed_fields(profile, {"full_name": full_name, "avatar_url": avatar_url})
                        try:
                            if patch:
                                with db.get_session() as s:
                                    profiles_ctl.update_profile(s, ctx.caller, ctx.user["id"], patch)
                            st.success("Profile updated.")
                        except Exception as e:
                            show_error("Updating profile", e)
        if st.button("Sign out", key="sign_out"):
            sign_out(ctx)


ctx = get_session_context()
route = resolve(st.query_params.get("page"), ctx.authenticated, ctx.is_admin, ctx.loading)

if route.kind == "loading":
    st.info("Loading...")
    st.stop()

if route.kind == "redirect":
    go(route.page)

if route.kind == "public":
    PUBLIC_RENDERERS[route.page]()
    st.stop()

if route.kind == "not-found":
    st.header("404")
    st.write(f"Page **{route.page}** was not found.")
    if st.button("Return home"):
        go("dashboard" if ctx.authenticated else "landing")
    st.stop()

render_sidebar(ctx, route.page)

if route.kind == "denied":
    st.warning("This page is for admins only.")
    st.stop()

PAGE_RENDERERS[route.page](ctx)
