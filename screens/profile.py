# screens/profile.py
import streamlit as st

from core.profile_service import actor_scope, fetch_actor_profile
from core.ui import format_timestamp

ROLE_LABELS = {
    "superadmin": "Super Admin",
    "research_coordinator": "Research Coordinator",
    "hod": "Head of Department",
}


def render():
    st.title("👤 Profile")

    engine = st.session_state.get("engine")
    user = st.session_state.get("user") or {}
    email = (user.get("email") or "").strip().lower()
    roles = user.get("roles") or []

    if not user:
        st.error("User not found in session. Please log in again.")
        return

    profile = fetch_actor_profile(engine, email) if engine else None
    if not profile:
        st.warning("No portal profile found for this account.")
        return

    st.markdown("### Account")
    st.json({
        "name": profile.get("name") or email or "—",
        "email": email or "—",
        "phone": profile.get("phone_no") or "—",
        "role": ROLE_LABELS.get(profile.get("role"), profile.get("role") or "—"),
        "roles": sorted(r for r in roles if r != "public") or ["—"],
        "faculty": profile.get("assigned_faculty") or "—",
        "department": profile.get("assigned_department") or "—",
        "department_code": profile.get("department_code") or "—",
        "last_updated": format_timestamp(profile.get("updated_at")),
    })

    scope = actor_scope(profile)
    if scope:
        st.info(f"Your workflow tables show records for **{scope}**.")
    else:
        st.info("Your account is not limited to one faculty or department.")


if __name__ == "__main__":
    render()
