# core/navigation.py
import streamlit as st

ROUTE_FLAGS = ("show_login", "show_logout")

def current_route() -> str:
    """'login', 'logout' or 'app' depending on the session flags."""
    if st.session_state.get("show_logout"):
        return "logout"
    if st.session_state.get("show_login") or not (st.session_state.get("user") or {}).get("email"):
        return "login"
    return "app"

def navigate_to_login():
    st.session_state.pop("show_logout", None)
    st.session_state["show_login"] = True
    st.rerun()

def navigate_to_logout():
    st.session_state["show_logout"] = True
    st.rerun()

def navigate_to_app():
    for flag in ROUTE_FLAGS:
        st.session_state.pop(flag, None)
    st.rerun()
