# ui/dashboard_panel.py
import streamlit as st

from db import get_session
from ui.common import money
from utils.stats import dashboard_stats


def render_dashboard(ctx):
    st.header("Dashboard")
    st.caption(f"Welcome back, **{ctx.user['full_name']}**")
    try:
        with get_session() as s:
            stats = dashboard_stats(s, ctx.caller, ctx.is_admin)
    except Exception as e:
        st.error(f"Loading dashboard failed: {e}")
        return

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Projects", stats["total_projects"])
    c2.metric("Active", stats["active_projects"])
    c3.metric("Ongoing", stats["ongoing_projects"])
    c4.metric("Completed", stats["completed_projects"])

    c5, c6 = st.columns(2)
    c5.metric("Total Tasks", stats["total_tasks"])
    c6.metric("Pending Tasks", stats["pending_tasks"])

    if stats["finance"] is not None:
        st.markdown("---")
        st.subheader("Finance")
        f1, f2, f3 = st.columns(3)
        f1.metric("Income", money(stats["finance"]["income"]))
        f2.metric("Expenses", money(stats["finance"]["expenses"]))
        f3.metric("Profit", money(stats["finance"]["profit"]))
