# ui/tasks_panel.py
import streamlit as st

from controllers import projects as projects_ctl
from controllers import tasks as tasks_ctl
from controllers.base import changed_fields
from db import get_session
from models import TaskStatus
from ui.common import confirm_delete, csv_button, force_rerun, show_error

STATUS_OPTIONS = [s.value for s in TaskStatus]
CSV_COLUMNS = ["title", "status", "deadline", "project_name", "description"]

# Consistent status colors (Jira-like palette)
STATUS_COLORS = {
    "todo": "#9CA3AF",
    "in_progress": "#2563EB",
    "done": "#16A34A",
}


def _status_badge(status: str) -> str:
    label = tasks_ctl.STATUS_LABELS.get(status, status)
    return f"<span style='color:{STATUS_COLORS.get(status, '#6b7280')};font-weight:600'>{label}</span>"


def _on_status_change(ctx, task):
    key = f"status_{task['id']}"
    try:
        with get_session() as s:
            tasks_ctl.set_task_status(s, ctx.caller, task["id"], st.session_state[key])
    except Exception as e:
        st.session_state[key] = task["status"]
        st.session_state["tasks_flash"] = f"Updating task failed: {e}"


def _task_form(key: str, current: dict, project_opts: dict):
    """Returns (submitted, values) for the edit form."""
    labels = ["—"] + list(project_opts.keys())
    project_label = next((name for name, pid in project_opts.items() if pid == current.get("project_id")), "—")
    with st.form(key):
        title = st.text_input("Title", value=current["title"], key=f"{key}_title")
        description = st.text_area("Description", value=current.get("description") or "", key=f"{key}_desc")
        c1, c2, c3 = st.columns(3)
        with c1:
            status = st.selectbox("Status", STATUS_OPTIONS, index=STATUS_OPTIONS.index(current["status"]),
                                  format_func=lambda v: tasks_ctl.STATUS_LABELS[v], key=f"{key}_status")
        with c2:
            deadline = st.date_input("Deadline", value=current.get("deadline"), key=f"{key}_deadline")
        with c3:
            project_label = st.selectbox("Project", labels, index=labels.index(project_label), key=f"{key}_project")
        submitted = st.form_submit_button("Save task")
    return submitted, {
        "title": title, "description": description, "status": status,
        "deadline": deadline, "project_id": project_opts.get(project_label),
    }


def _render_edit(ctx, task: dict, project_opts: dict):
    submitted, values = _task_form(f"form_edit_task_{task['id']}", task, project_opts)
    if not submitted:
        return
    patch = changed_fields(task, values)
    if not patch:
        st.info("Nothing to save.")
        return
    try:
        with get_session() as s:
            tasks_ctl.update_task(s, ctx.caller, task["id"], patch)
        force_rerun()
    except Exception as e:
        show_error("Updating task", e)


def render_tasks(ctx):
    st.header("Tasks")
    flash = st.session_state.pop("tasks_flash", None)
    if flash:
        st.error(flash)
    try:
        with get_session() as s:
            project_opts = projects_ctl.project_options(s, ctx.caller)
    except Exception as e:
        st.error(f"Loading projects failed: {e}")
        return

    with st.expander("➕ New Task"):
        with st.form("new_task", clear_on_submit=True):
            title = st.text_input("Title")
            description = st.text_area("Description")
            c1, c2, c3 = st.columns(3)
            with c1:
                status = st.selectbox("Status", STATUS_OPTIONS, format_func=lambda v: tasks_ctl.STATUS_LABELS[v])
            with c2:
                deadline = st.date_input("Deadline", value=None)
            with c3:
                project_label = st.selectbox("Project", ["—"] + list(project_opts.keys()))
            if st.form_submit_button("Create task"):
                try:
                    with get_session() as s:
                        tasks_ctl.create_task(s, ctx.caller, {
                            "title": title, "description": description, "status": status,
                            "deadline": deadline, "project_id": project_opts.get(project_label),
                        })
                    st.success("Task created.")
                    force_rerun()
                except Exception as e:
                    show_error("Creating task", e)

    f1, f2 = st.columns(2)
    with f1:
        filter_project = st.selectbox("Filter by project", ["All"] + list(project_opts.keys()))
    with f2:
        filter_status = st.selectbox("Filter by status", ["All"] + STATUS_OPTIONS,
                                     format_func=lambda v: tasks_ctl.STATUS_LABELS.get(v, v))
    try:
        with get_session() as s:
            tasks = tasks_ctl.list_tasks(
                s, ctx.caller,
                project_id=project_opts.get(filter_project),
                status=None if filter_status == "All" else filter_status,
            )
    except Exception as e:
        st.error(f"Loading tasks failed: {e}")
        return

    if not tasks:
        st.info("No tasks found.")
        return

    csv_button(tasks, CSV_COLUMNS, "tasks.csv")
    for t in tasks:
        with st.container(border=True):
            c1, c2, c3 = st.columns([4, 2, 1])
            with c1:
                st.markdown(f"**{t['title']}**  {_status_badge(t['status'])}", unsafe_allow_html=True)
                meta = [x for x in (t.get("project_name"), f"due {t['deadline']}" if t.get("deadline") else None) if x]
                if meta:
                    st.caption("  ·  ".join(meta))
                if t.get("description"):
                    st.write(t["description"])
            with c2:
                st.selectbox(
                    "Status", STATUS_OPTIONS, index=STATUS_OPTIONS.index(t["status"]),
                    format_func=lambda v: tasks_ctl.STATUS_LABELS[v], key=f"status_{t['id']}",
                    label_visibility="collapsed", on_change=_on_status_change, args=(ctx, t),
                )
            with c3:
                def _delete(task_id=t["id"]):
                    with get_session() as s:
                        tasks_ctl.delete_task(s, ctx.caller, task_id)
                confirm_delete(f"task_{t['id']}", t["title"], _delete)
            if st.toggle("Edit", key=f"edit_task_{t['id']}"):
                _render_edit(ctx, t, project_opts)
