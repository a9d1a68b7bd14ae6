# ui/auth_panel.py
"""Landing, sign-in/sign-up, forgot and reset password screens."""

import streamlit as st

import auth
from db import get_session
from errors import AppError
from ui.common import go, show_error

_SESSION_KEY = "session_ctx"

HIDE_SIDEBAR = """
<style>
  [data-testid="stSidebar"], [data-testid="baseButton-headerNoPadding"] { display:none!important; }
  .main > div { padding-top: 6vh !important; }
</style>
"""


def get_session_context() -> auth.SessionContext:
    """Per-browser SessionContext, refreshed on every rerun."""
    ctx = st.session_state.get(_SESSION_KEY)
    if ctx is None:
        ctx = auth.SessionContext()
        st.session_state[_SESSION_KEY] = ctx
    with get_session() as s:
        ctx.refresh(s)
    return ctx


def sign_out(ctx: auth.SessionContext):
    ctx.sign_out()
    for k in [k for k in st.session_state.keys() if k != _SESSION_KEY]:
        del st.session_state[k]
    go("landing")


def render_landing():
    st.markdown(HIDE_SIDEBAR, unsafe_allow_html=True)
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.markdown("<h1 style='text-align:center;'>Foundry-PM</h1>", unsafe_allow_html=True)
        st.markdown(
            "<p style='text-align:center;'>Projects, tasks, notes and finances for founders and small teams.</p>",
            unsafe_allow_html=True,
        )
        if st.button("Get started", use_container_width=True, type="primary"):
            go("auth")


def render_auth():
    st.markdown(HIDE_SIDEBAR, unsafe_allow_html=True)
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.markdown("<h2 style='text-align:center;'>Welcome</h2>", unsafe_allow_html=True)
        tab_in, tab_up = st.tabs(["Sign in", "Sign up"])

        with tab_in:
            with st.form("sign_in_form", clear_on_submit=False):
                email = st.text_input("Email", placeholder="you@example.com")
                password = st.text_input("Password", type="password")
                submitted = st.form_submit_button("Sign in", use_container_width=True)
            if submitted:
                try:
                    with get_session() as s:
                        result = auth.sign_in(s, email, password)
                        st.session_state[_SESSION_KEY].establish(s, result)
                    go("dashboard")
                except AppError as e:
                    show_error("Sign in", e)
            if st.button("Forgot password?", key="goto_forgot"):
                go("forgot-password")

        with tab_up:
            with st.form("sign_up_form", clear_on_submit=False):
                full_name = st.text_input("Full name")
                email_up = st.text_input("Email", key="signup_email", placeholder="you@example.com")
                password_up = st.text_input("Password", type="password", key="signup_password",
                                            help="At least 6 characters")
                submitted_up = st.form_submit_button("Create account", use_container_width=True)
            if submitted_up:
                try:
                    with get_session() as s:
                        auth.sign_up(s, email_up, password_up, full_name)
                        result = auth.sign_in(s, email_up, password_up)
                        st.session_state[_SESSION_KEY].establish(s, result)
                    st.success("Account created.")
                    go("dashboard")
                except AppError as e:
                    show_error("Sign up", e)


def render_forgot_password():
    st.markdown(HIDE_SIDEBAR, unsafe_allow_html=True)
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.subheader("Forgot your password?")
        st.caption("Enter your email and we'll send you a reset link.")
        with st.form("forgot_form"):
            email = st.text_input("Email", placeholder="you@example.com")
            submitted = st.form_submit_button("Send reset link", use_container_width=True)
        if submitted:
            try:
                with get_session() as s:
                    auth.request_password_reset(s, email)
                st.success("If that email is registered, a reset link is on its way.")
            except AppError as e:
                show_error("Password reset", e)
        if st.button("Back to sign in"):
            go("auth")


def render_reset_password():
    st.markdown(HIDE_SIDEBAR, unsafe_allow_html=True)
    token = st.query_params.get("token", "")
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.subheader("Choose a new password")
        if not token:
            st.error("This reset link is missing its token.")
            return
        with st.form("reset_form"):
            pw1 = st.text_input("New password", type="password")
            pw2 = st.text_input("Confirm password", type="password")
            submitted = st.form_submit_button("Update password", use_container_width=True)
        if submitted:
            if pw1 != pw2:
                st.warning("Passwords do not match.")
            else:
                try:
                    with get_session() as s:
                        auth.reset_password(s, token, pw1)
                    st.success("Password updated. You can sign in now.")
                except AppError as e:
                    show_error("Password reset", e)
        if st.button("Go to sign in"):
            go("auth")
