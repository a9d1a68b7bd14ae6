# ui/reports_panel.py
import streamlit as st
import plotly.express as px
import pandas as pd

from controllers.finance import list_finance_records
from db import get_session
from utils.report_pdf import build_report_pdf
from utils.stats import finance_totals, report_data

PROJECT_COLORS = {"active": "#2563EB", "ongoing": "#F59E0B", "completed": "#16A34A"}
TASK_COLORS = {"todo": "#9CA3AF", "in progress": "#2563EB", "done": "#16A34A"}


def _bar(rows, colors, title):
    df = pd.DataFrame(rows, columns=["status", "count"])
    fig = px.bar(df, x="status", y="count", color="status", color_discrete_map=colors, title=title)
    fig.update_layout(template="plotly_white", showlegend=False, margin=dict(l=20, r=20, t=40, b=20), height=340)
    return fig


def render_reports(ctx):
    st.header("Reports")
    try:
        with get_session() as s:
            report = report_data(s, ctx.caller)
            finance = finance_totals(list_finance_records(s, ctx.caller)) if ctx.is_admin else None
    except Exception as e:
        st.error(f"Loading reports failed: {e}")
        return

    c1, c2 = st.columns(2)
    with c1:
        st.plotly_chart(_bar(report["projects"], PROJECT_COLORS, "Projects by Status"), use_container_width=True)
    with c2:
        st.plotly_chart(_bar(report["tasks"], TASK_COLORS, "Tasks by Status"), use_container_width=True)

    st.markdown("---")
    st.subheader("Export PDF")
    if st.button("📄 Generate PDF"):
        try:
            pdf_bytes = build_report_pdf(report, finance)
            st.download_button(
                label="Download Report",
                data=pdf_bytes,
                file_name="foundry_pm_report.pdf",
                mime="application/pdf",
            )
        except Exception as e:
            st.error(f"PDF export failed: {e}")
