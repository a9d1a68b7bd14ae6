# ui/notes_panel.py
import streamlit as st

from controllers import notes as notes_ctl
from controllers import projects as projects_ctl
from db import get_session
from ui.common import confirm_delete, force_rerun, show_error


def render_notes(ctx):
    st.header("Notes")
    try:
        with get_session() as s:
            project_opts = projects_ctl.project_options(s, ctx.caller)
            notes = notes_ctl.list_notes(s, ctx.caller)
    except Exception as e:
        st.error(f"Loading notes failed: {e}")
        return
    project_names = {v: k for k, v in project_opts.items()}

    with st.form("new_note", clear_on_submit=True):
        content = st.text_area("New note", placeholder="Write something…")
        project_label = st.selectbox("Project (optional)", ["—"] + list(project_opts.keys()))
        if st.form_submit_button("Add note"):
            try:
                with get_session() as s:
                    notes_ctl.create_note(s, ctx.caller, {
                        "content": content, "project_id": project_opts.get(project_label),
                    })
                force_rerun()
            except Exception as e:
                show_error("Adding note", e)

    if not notes:
        st.info("No notes yet.")
        return

    for n in notes:
        with st.container(border=True):
            meta = [n["author_name"], str(n["created_at"])[:16]]
            if n.get("project_id") in project_names:
                meta.append(project_names[n["project_id"]])
            st.caption("  ·  ".join(meta))
            st.write(n["content"])
            if n["created_by"] == ctx.user["id"] or ctx.is_admin:
                def _delete(note_id=n["id"]):
                    with get_session() as s:
                        notes_ctl.delete_note(s, ctx.caller, note_id)
                confirm_delete(f"note_{n['id']}", "note", _delete)
