# ui/common.py
"""Small Streamlit helpers shared by the panels."""

from typing import Callable, Dict, List, Optional

import pandas as pd
import streamlit as st

from errors import FormValidationError


def force_rerun():
    fn = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if fn:
        fn()


def go(page: str, **params):
    """Switch the `?page=` route and rerun."""
    st.query_params.clear()
    st.query_params["page"] = page
    for k, v in params.items():
        st.query_params[k] = v
    force_rerun()


def show_error(action: str, e: Exception):
    """Inline warning for bad input, generic error notification otherwise."""
    if isinstance(e, FormValidationError):
        st.warning(str(e))
    else:
        st.error(f"{action} failed: {e}")


def confirm_delete(key: str, label: str, on_confirm: Callable[[], None]) -> None:
    """Two-step delete: the first click arms, the second commits."""
    flag = f"confirm_delete_{key}"
    if not st.session_state.get(flag):
        if st.button("🗑️ Delete", key=f"btn_{flag}"):
            st.session_state[flag] = True
            force_rerun()
        return
    st.warning(f"Delete {label}? This cannot be undone.")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Yes, delete", key=f"yes_{flag}", type="primary"):
            st.session_state[flag] = False
            try:
                on_confirm()
            except Exception as e:
                show_error("Delete", e)
            else:
                st.toast(f"{label} deleted.")
                force_rerun()
    with c2:
        if st.button("Cancel", key=f"no_{flag}"):
            st.session_state[flag] = False
            force_rerun()


def csv_button(rows: List[Dict], columns: List[str], file_name: str, label: str = "⬇️ Export CSV",
               key: Optional[str] = None):
    df = pd.DataFrame(rows, columns=columns)
    st.download_button(label, data=df.to_csv(index=False).encode("utf-8"), file_name=file_name,
                       mime="text/csv", key=key or f"csv_{file_name}")


def money(x) -> str:
    return f"${float(x or 0):,.2f}"
