# ui/projects_panel.py

import streamlit as st

from controllers import finance as finance_ctl
from controllers import payments as payments_ctl
from controllers import projects as projects_ctl
from controllers.base import changed_fields
from db import get_session
from models import ProjectStatus
from ui.common import confirm_delete, csv_button, force_rerun, money, show_error

__all__ = ["render_projects"]

CSV_COLUMNS = ["name", "status", "start_date", "deadline", "client_name", "client_email",
               "responsible_person", "total_amount", "amount_paid"]
STATUS_OPTIONS = [s.value for s in ProjectStatus]


def _project_form(key: str, current: dict = None):
    """Returns (submitted, values) for the create/edit form."""
    current = current or {}
    with st.form(key, clear_on_submit=current == {}):
        name = st.text_input("Project name", value=current.get("name", ""), key=f"{key}_name")
        description = st.text_area("Description", value=current.get("description") or "", key=f"{key}_desc")
        deliverables = st.text_area("Deliverables", value=current.get("deliverables") or "", key=f"{key}_deliv")
        c1, c2, c3 = st.columns(3)
        with c1:
            start = st.date_input("Start date", value=current.get("start_date") or finance_ctl.utc_today(), key=f"{key}_start")
        with c2:
            deadline = st.date_input("Deadline", value=current.get("deadline") or finance_ctl.utc_today(), key=f"{key}_deadline")
        with c3:
            status = st.selectbox("Status", STATUS_OPTIONS,
                                  index=STATUS_OPTIONS.index(current.get("status", "active")), key=f"{key}_status")
        c4, c5, c6 = st.columns(3)
        with c4:
            client_name = st.text_input("Client name", value=current.get("client_name") or "", key=f"{key}_cname")
        with c5:
            client_email = st.text_input("Client email", value=current.get("client_email") or "", key=f"{key}_cemail")
        with c6:
            client_phone = st.text_input("Client phone", value=current.get("client_phone") or "", key=f"{key}_cphone")
        responsible = st.text_input("Responsible person", value=current.get("responsible_person") or "", key=f"{key}_resp")
        c7, c8 = st.columns(2)
        with c7:
            total = st.text_input("Total amount", value=str(current.get("total_amount") or 0), key=f"{key}_total")
        with c8:
            paid = st.text_input("Amount paid", value=str(current.get("amount_paid") or 0), key=f"{key}_paid")
        submitted = st.form_submit_button("Save project")
    return submitted, {
        "name": name, "description": description, "deliverables": deliverables,
        "start_date": start, "deadline": deadline, "status": status,
        "client_name": client_name, "client_email": client_email, "client_phone": client_phone,
        "responsible_person": responsible, "total_amount": total, "amount_paid": paid,
    }


def _render_payment(ctx, pay: dict):
    c1, c2, c3 = st.columns([4, 1, 1])
    with c1:
        meta = [x for x in (pay.get("payment_method"), pay.get("notes")) if x]
        st.markdown(f"**{money(pay['amount'])}** on {pay['payment_date']}" + (f"  ·  {'  ·  '.join(meta)}" if meta else ""))
    with c2:
        editing = st.toggle("Edit", key=f"edit_payment_{pay['id']}")
    with c3:
        def _delete():
            with get_session() as s:
                payments_ctl.delete_payment(s, ctx.caller, pay["id"])
        confirm_delete(f"payment_{pay['id']}", f"payment of {money(pay['amount'])}", _delete)
    if not editing:
        return
    key = f"form_edit_payment_{pay['id']}"
    with st.form(key):
        e1, e2, e3 = st.columns(3)
        with e1:
            amount = st.number_input("Amount", value=float(pay["amount"]), step=10.0, key=f"{key}_amt")
        with e2:
            pay_date = st.date_input("Date", value=pay["payment_date"], key=f"{key}_date")
        with e3:
            method = st.text_input("Method", value=pay.get("payment_method") or "", key=f"{key}_method")
        notes = st.text_input("Notes", value=pay.get("notes") or "", key=f"{key}_notes")
        submitted = st.form_submit_button("Save payment")
    if submitted:
        patch = changed_fields(pay, {"amount": amount, "payment_date": pay_date,
                                     "payment_method": method, "notes": notes})
        if not patch:
            st.info("Nothing to save.")
            return
        try:
            with get_session() as s:
                payments_ctl.update_payment(s, ctx.caller, pay["id"], patch)
            force_rerun()
        except Exception as e:
            show_error("Updating payment", e)


def _render_detail(ctx, p: dict):
    st.markdown(f"**Status:** {p['status']}  ·  **Start:** {p['start_date']}  ·  **Deadline:** {p['deadline']}")
    if p.get("description"):
        st.write(p["description"])
    if p.get("deliverables"):
        st.markdown("**Deliverables**")
        st.write(p["deliverables"])
    if p.get("client_name") or p.get("client_email") or p.get("client_phone"):
        st.markdown(f"**Client:** {p.get('client_name') or '—'}  ·  {p.get('client_email') or '—'}  ·  "
                    f"{p.get('client_phone') or '—'}")
    if p.get("responsible_person"):
        st.markdown(f"**Responsible:** {p['responsible_person']}")

    c1, c2, c3 = st.columns(3)
    c1.metric("Total", money(p["total_amount"]))
    c2.metric("Paid", money(p["amount_paid"]))
    c3.metric("Balance", f"${projects_ctl.format_money(projects_ctl.project_balance(p))}")

    if ctx.is_admin:
        with get_session() as s:
            pays = payments_ctl.list_payments(s, ctx.caller, project_id=p["id"])
        st.markdown("**Payments**")
        if pays:
            for x in pays:
                _render_payment(ctx, x)
        else:
            st.caption("No payments recorded.")
        with st.form(f"payment_{p['id']}", clear_on_submit=True):
            c1, c2, c3 = st.columns(3)
            with c1:
                amount = st.text_input("Amount", key=f"pay_amt_{p['id']}")
            with c2:
                pay_date = st.date_input("Date", value=finance_ctl.utc_today(), key=f"pay_date_{p['id']}")
            with c3:
                method = st.text_input("Method", key=f"pay_method_{p['id']}")
            notes = st.text_input("Notes", key=f"pay_notes_{p['id']}")
            if st.form_submit_button("Record payment"):
                try:
                    with get_session() as s:
                        payments_ctl.create_payment(s, ctx.caller, {
                            "amount": amount, "payment_date": pay_date, "payment_method": method,
                            "notes": notes, "project_id": p["id"],
                        })
                    force_rerun()
                except Exception as e:
                    show_error("Recording payment", e)

    edit_key = f"edit_project_{p['id']}"
    if st.toggle("Edit", key=edit_key):
        submitted, values = _project_form(f"form_{edit_key}", p)
        if submitted:
            try:
                with get_session() as s:
                    projects_ctl.update_project(s, ctx.caller, p["id"], values)
                force_rerun()
            except Exception as e:
                show_error("Updating project", e)

    def _delete():
        with get_session() as s:
            projects_ctl.delete_project(s, ctx.caller, p["id"])

    confirm_delete(f"project_{p['id']}", p["name"], _delete)


def render_projects(ctx):
    st.header("Projects")

    if ctx.is_admin:
        with st.expander("➕ New Project"):
            submitted, values = _project_form("new_project")
            if submitted:
                try:
                    with get_session() as s:
                        projects_ctl.create_project(s, ctx.caller, values)
                    st.success("Project created.")
                    force_rerun()
                except Exception as e:
                    show_error("Creating project", e)

    search = st.text_input("Search projects", placeholder="Name or description…")
    try:
        with get_session() as s:
            projects = projects_ctl.list_projects(s, ctx.caller, search=search)
    except Exception as e:
        st.error(f"Loading projects failed: {e}")
        return

    if not projects:
        st.info("No projects yet.")
        return

    csv_button(projects, CSV_COLUMNS, "projects.csv")
    for p in projects:
        with st.expander(f"{p['name']}  ·  {p['status']}"):
            _render_detail(ctx, p)
