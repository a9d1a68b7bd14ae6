# ui/team_panel.py
import streamlit as st

from controllers import team as team_ctl
from db import get_session
from functions_client import FunctionsClient
from models import AppRole
from ui.common import confirm_delete, force_rerun, show_error

ROLE_OPTIONS = [r.value for r in AppRole]


def _on_role_change(ctx, member):
    key = f"role_{member['id']}"
    try:
        with get_session() as s:
            team_ctl.change_role(s, ctx.caller, member["id"], st.session_state[key])
    except Exception as e:
        st.session_state[key] = member["role"]
        st.session_state["team_flash"] = f"Changing role failed: {e}"


def render_team(ctx):
    st.header("Team")
    flash = st.session_state.pop("team_flash", None)
    if flash:
        st.error(flash)
    client = FunctionsClient(ctx.access_token)

    with st.expander("➕ Invite member"):
        with st.form("invite_member", clear_on_submit=True):
            full_name = st.text_input("Full name")
            email = st.text_input("Email")
            password = st.text_input("Temporary password", type="password")
            role = st.selectbox("Role", ROLE_OPTIONS, index=ROLE_OPTIONS.index("member"))
            if st.form_submit_button("Create account"):
                try:
                    with get_session() as s:
                        team_ctl.invite_member(s, ctx.caller, email, password, full_name, role)
                    st.success(f"Account created for {email}.")
                    force_rerun()
                except Exception as e:
                    show_error("Inviting member", e)

    try:
        with get_session() as s:
            members = team_ctl.fetch_team(s, ctx.caller, client)
    except Exception as e:
        st.error(f"Loading team failed: {e}")
        return

    if not members:
        st.info("No team members yet.")
        return

    for m in members:
        with st.container(border=True):
            c1, c2, c3 = st.columns([4, 2, 1])
            with c1:
                st.markdown(f"**{m['full_name']}**")
                st.caption(f"{m['email']}  ·  joined {str(m.get('created_at') or '')[:10]}")
            with c2:
                st.selectbox("Role", ROLE_OPTIONS, index=ROLE_OPTIONS.index(m["role"]),
                             key=f"role_{m['id']}", label_visibility="collapsed",
                             disabled=m["id"] == ctx.user["id"], on_change=_on_role_change, args=(ctx, m))
            with c3:
                if m["id"] != ctx.user["id"]:
                    confirm_delete(f"user_{m['id']}", m["full_name"],
                                   lambda user_id=m["id"]: team_ctl.delete_member(client, user_id))
