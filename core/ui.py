# core/ui.py
from __future__ import annotations
import datetime
from typing import Optional
import streamlit as st

def hide_sidebar():
    st.markdown("""
        <style>
            section[data-testid="stSidebar"] {
                display: none;
            }
        </style>
    """, unsafe_allow_html=True)

def show_result(ok: bool, message: str):
    """Visible outcome of a backend call."""
    if ok:
        st.success(message)
    else:
        st.error(message)

def loading_placeholder(label: str = "Loading records..."):
    st.info(f"⏳ {label}")

def empty_result(scope: Optional[str]):
    st.info(f"No records found for {scope or 'this scope'}.")

def format_timestamp(value) -> str:
    if not value:
        return "-"
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.strftime("%d %b %Y %H:%M") if isinstance(value, datetime.datetime) else value.strftime("%d %b %Y")
    try:
        return datetime.datetime.fromisoformat(str(value)).strftime("%d %b %Y %H:%M")
    except ValueError:
        return str(value)

def render_footer(app_name: str):
    year = datetime.datetime.now().year
    st.markdown(
        f"""
        <div style="margin-top:2rem;padding:.75rem 0;font-size:.9rem;
                    border-top:1px solid rgba(0,0,0,.15);opacity:.9">
          © {year} • {app_name}
        </div>
        """,
        unsafe_allow_html=True,
    )
