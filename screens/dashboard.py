# screens/dashboard.py
from __future__ import annotations

import streamlit as st

from core.dashboard_stats import summarise
from core.department_mapping import FACULTIES
from core.policy import require_page
from core.profile_service import actor_scope, fetch_actor_profile
from core.projection import SCHOLAR_WORKFLOW, scope_filter
from core.records import ScholarRecord, as_records
from screens.workflow.db import fetch_faculty_scholars


@st.cache_data(ttl=60)
def _load(_engine, faculty: str):
    return fetch_faculty_scholars(_engine, faculty)


@require_page("Faculty Dashboard")
def render():
    st.title("📊 Faculty Dashboard")

    engine = st.session_state.get("engine")
    user = st.session_state.get("user") or {}
    if not (engine and user):
        st.error("User not found in session. Please log in again.")
        return

    faculty = actor_scope(fetch_actor_profile(engine, user.get("email")))
    if not faculty:
        faculty = st.selectbox("Faculty", FACULTIES, key="dashboard_faculty_picker")

    records = as_records(_load(engine, faculty), ScholarRecord)
    stats = summarise(scope_filter(records, faculty, SCHOLAR_WORKFLOW.ownership_fields))

    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Total Applications", stats["total"])
    c2.metric("Full Time", stats["full_time"])
    c3.metric("Part Time", stats["part_time"])
    c4.metric("Forwarded", stats["forwarded"])
    c5.metric("Pending", stats["pending"])

    st.markdown("### By department")
    breakdown = stats["by_department"]
    if breakdown.empty:
        st.info(f"No records found for {faculty}.")
    else:
        st.dataframe(breakdown, width="stretch", hide_index=True)
        st.bar_chart(breakdown.set_index("Department")[["Forwarded", "Pending"]])


if __name__ == "__main__":
    render()
