# screens/settings.py
from __future__ import annotations

import streamlit as st

from core.activity_log import activity_history
from core.policy import can_edit_page
from core.profile_service import fetch_actor_profile, update_actor_profile
from core.theme import THEMES, apply_theme, load_theme_preference, save_theme_preference
from core.ui import format_timestamp, show_result


def _render_profile_form(engine, email: str, editable: bool):
    profile = fetch_actor_profile(engine, email) or {}
    with st.form("settings_profile_form"):
        name = st.text_input("Name", value=profile.get("name") or "", disabled=not editable)
        phone = st.text_input("Phone", value=profile.get("phone_no") or "", disabled=not editable)
        st.text_input("Email", value=email, disabled=True)
        submitted = st.form_submit_button("Save profile", disabled=not editable)
    if submitted:
        ok, msg = update_actor_profile(engine, email, {"name": name, "phone_no": phone})
        show_result(ok, msg)
        if ok:
            st.session_state["user"]["full_name"] = name.strip()


def _render_theme_picker(engine, email: str):
    keys = list(THEMES)
    current = load_theme_preference(engine, email)
    picked = st.selectbox(
        "Theme", keys,
        index=keys.index(current),
        format_func=lambda k: THEMES[k]["name"],
        key="settings_theme_pick",
    )
    if st.button("Apply theme", key="settings_theme_apply"):
        save_theme_preference(engine, email, picked)
        apply_theme(picked)
        st.success(f"Theme set to {THEMES[picked]['name']}")
        st.rerun()


def _render_activity(engine, email: str):
    history = activity_history(engine, email, limit=25)
    if not history:
        st.caption("No activity recorded yet.")
        return
    st.dataframe(
        [
            {"When": format_timestamp(h["created_at"]), "Action": h["action"], "Details": h["details"]}
            for h in history
        ],
        width="stretch", hide_index=True,
    )


def render():
    st.title("⚙️ Settings")

    engine = st.session_state.get("engine")
    user = st.session_state.get("user") or {}
    email = (user.get("email") or "").strip().lower()
    if not (engine and email):
        st.error("User not found in session. Please log in again.")
        return

    tab_profile, tab_theme, tab_activity = st.tabs(["Profile", "Appearance", "Recent Activity"])
    with tab_profile:
        _render_profile_form(engine, email, can_edit_page("Settings", user.get("roles") or set(), engine=engine))
    with tab_theme:
        _render_theme_picker(engine, email)
    with tab_activity:
        _render_activity(engine, email)


if __name__ == "__main__":
    render()
