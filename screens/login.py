# screens/login.py
from __future__ import annotations
import streamlit as st

from core.auth import authenticate
from core.navigation import navigate_to_app
from core.theme import load_theme_preference
from core.ui import hide_sidebar

def render(engine, settings):
    hide_sidebar()

    st.title("🔐 Login")
    st.caption(settings.app.name)

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", type="primary")

    if settings.app.environment == "development":
        with st.expander("Demo accounts"):
            st.markdown(
                "- `admin@example.com` (Super Admin)\n"
                "- `coordinator.foet@example.com` (Research Coordinator, Engineering)\n"
                "- `hod.cse@example.com` (HOD, Computer Science and Engineering)\n\n"
                f"Password: `{settings.auth.demo_password}`"
            )

    if submitted:
        user = authenticate(engine, email, password)
        if not user:
            st.error("Invalid email or password.")
            return
        st.session_state["user"] = user
        st.session_state["theme_name"] = load_theme_preference(
            engine, user["email"], default=settings.portal.default_theme,
        )
        st.success(f"Logged in as {user['email']}! Redirecting...")
        navigate_to_app()
