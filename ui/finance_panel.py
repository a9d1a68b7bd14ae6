# ui/finance_panel.py
import streamlit as st
import plotly.express as px
import pandas as pd

from controllers import finance as finance_ctl
from controllers import projects as projects_ctl
from db import get_session
from models import FinanceType
from ui.common import confirm_delete, csv_button, force_rerun, money, show_error
from utils.stats import finance_totals

CSV_COLUMNS = ["date", "type", "amount", "description", "project_name"]


def render_finance(ctx):
    st.header("Finance")
    try:
        with get_session() as s:
            project_opts = projects_ctl.project_options(s, ctx.caller)
    except Exception as e:
        st.error(f"Loading projects failed: {e}")
        return

    with st.expander("➕ New Record"):
        with st.form("new_finance", clear_on_submit=True):
            c1, c2, c3 = st.columns(3)
            with c1:
                kind = st.selectbox("Type", [t.value for t in FinanceType], format_func=str.capitalize)
            with c2:
                amount = st.text_input("Amount", placeholder="0.00")
            with c3:
                day = st.date_input("Date", value=finance_ctl.utc_today())
            project_label = st.selectbox("Project", ["—"] + list(project_opts.keys()))
            description = st.text_input("Description")
            if st.form_submit_button("Add record"):
                try:
                    with get_session() as s:
                        finance_ctl.create_finance_record(s, ctx.caller, {
                            "type": kind, "amount": amount, "date": day, "description": description,
                            "project_id": project_opts.get(project_label),
                        })
                    st.success("Record added.")
                    force_rerun()
                except Exception as e:
                    show_error("Adding record", e)

    date_filter = st.radio("Period", list(finance_ctl.DateFilter), format_func=lambda f: f.label, horizontal=True)
    try:
        with get_session() as s:
            records = finance_ctl.list_finance_records(s, ctx.caller, date_filter)
    except Exception as e:
        st.error(f"Loading finance records failed: {e}")
        return

    totals = finance_totals(records)
    c1, c2, c3 = st.columns(3)
    c1.metric("Income", money(totals["income"]))
    c2.metric("Expenses", money(totals["expenses"]))
    c3.metric("Profit", money(totals["profit"]))

    if not records:
        st.info("No records for this period.")
        return

    df = pd.DataFrame(records)
    by_day = df.groupby(["date", "type"])["amount"].sum().reset_index()
    fig = px.bar(by_day, x="date", y="amount", color="type", barmode="group",
                 color_discrete_map={"income": "#16A34A", "expense": "#DC2626"})
    fig.update_layout(template="plotly_white", margin=dict(l=20, r=20, t=30, b=20), height=320)
    st.plotly_chart(fig, use_container_width=True)

    csv_button(records, CSV_COLUMNS, f"finance_{date_filter.value}.csv")
    for r in records:
        with st.container(border=True):
            c1, c2 = st.columns([5, 1])
            with c1:
                sign = "+" if r["type"] == FinanceType.income.value else "−"
                st.markdown(f"**{sign}{money(r['amount'])}**  ·  {r['date']}  ·  {r.get('project_name') or '—'}")
                if r.get("description"):
                    st.caption(r["description"])
            with c2:
                def _delete(record_id=r["id"]):
                    with get_session() as s:
                        finance_ctl.delete_finance_record(s, ctx.caller, record_id)
                confirm_delete(f"finance_{r['id']}", "record", _delete)
