# screens/department/main.py
from __future__ import annotations

import logging

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from core.dashboard_stats import department_statistics
from core.policy import can_edit_page, require_page
from core.profile_service import fetch_actor_profile
from core.projection import DEPARTMENT_APPLICATIONS, DEPARTMENT_QUERIES, ProjectionPipeline
from core.records import ScholarRecord, as_records
from core.theme import status_badge_html
from core.ui import show_result
from screens.department.db import (
    approve_scholar, fetch_department_scholars, query_scholar, reject_scholar, resolve_query,
)
from screens.workflow.db import fetch_departments
from screens.workflow.table import render_table

log = logging.getLogger(__name__)

PAGE_TITLE = "🏛️ Department Portal"

COLUMNS = [
    ("application_no", "Application No"),
    ("registered_name", "Scholar Name"),
    ("email", "Email"),
    ("type", "Mode of Study"),
    ("cgpa", "CGPA"),
    ("dept_review", "Review Status"),
]

QUERY_COLUMNS = [
    ("application_no", "Application No"),
    ("registered_name", "Scholar Name"),
    ("dept_query", "Query"),
    ("query_timestamp", "Raised On"),
    ("dept_review", "Status"),
]

pipeline = ProjectionPipeline(DEPARTMENT_APPLICATIONS)
query_pipeline = ProjectionPipeline(DEPARTMENT_QUERIES)


@st.cache_data(ttl=60)
def _load(_engine, faculty: str, department: str):
    return fetch_department_scholars(_engine, faculty, department)


def _resolve_department(engine, profile: dict):
    """(faculty, department) of the HOD; superadmins pick a department."""
    if profile and profile.get("assigned_department"):
        return profile.get("assigned_faculty"), profile["assigned_department"]
    departments = fetch_departments(engine)
    if not departments:
        return None, None
    picked = st.selectbox(
        "Department", departments,
        format_func=lambda d: f"{d['department_name']} ({d['department_code']})",
        key="department_portal_picker",
    )
    return picked["faculty"], picked["department_name"]


def _render_stats(records):
    stats = department_statistics(records)
    c1, c2, c3, c4, c5, c6 = st.columns(6)
    c1.metric("Total", stats["total"])
    c2.metric("Pending", stats["pending"])
    c3.metric("Approved", stats["approved"])
    c4.metric("Rejected", stats["rejected"])
    c5.metric("Query", stats["query"])
    c6.metric("Resolved", stats["query_resolved"])


def _finish(ok: bool, msg: str):
    show_result(ok, msg)
    if ok:
        _load.clear()


def _render_review_actions(engine, visible, email: str):
    st.markdown("### Review")
    labels = {r.key: f"{r.application_no} · {r.name} ({r.text('dept_review') or 'Pending'})" for r in visible}
    scholar_id = st.selectbox("Scholar", list(labels), format_func=labels.get, key="dept_review_pick")
    current = next(r for r in visible if r.key == scholar_id)
    st.markdown(status_badge_html(current.text("dept_review") or "Pending"), unsafe_allow_html=True)

    actions = ["Approve", "Reject", "Query"]
    if current.has_open_query:
        st.caption(f"Open query: {current.text('dept_query')}")
        st.warning("This scholar has an open query. Resolve it on the Queries tab before approving or rejecting.")
        actions = ["Query"]
    action = st.radio("Action", actions, horizontal=True, key="dept_review_action")

    note = ""
    if action == "Reject":
        note = st.text_area("Rejection reason", key="dept_reject_reason")
    elif action == "Query":
        note = st.text_area("Query for the scholar", key="dept_query_text")

    if st.button("Submit", type="primary", key="dept_review_submit"):
        if action == "Approve":
            _finish(*approve_scholar(engine, scholar_id, email))
        elif action == "Reject":
            _finish(*reject_scholar(engine, scholar_id, note, email))
        else:
            _finish(*query_scholar(engine, scholar_id, note, email))


def _render_query_actions(engine, visible, email: str):
    st.markdown("### Query")
    labels = {r.key: f"{r.application_no} · {r.name}" for r in visible}
    scholar_id = st.selectbox("Scholar", list(labels), format_func=labels.get, key="dept_query_pick")
    current = next(r for r in visible if r.key == scholar_id)

    resolved = current.query_resolved
    st.markdown(status_badge_html("Query Resolved" if resolved else "Query"), unsafe_allow_html=True)
    st.info(current.text("dept_query") or "No query text available")
    if current.text("query_resolved_dept"):
        st.caption(f"Resolution: {current.text('query_resolved_dept')}")

    c1, c2, c3 = st.columns(3)
    if c1.button("Mark Resolved", disabled=not current.has_open_query, key="dept_query_resolve", width="stretch"):
        _finish(*resolve_query(engine, scholar_id, email))
    if c2.button("Approve", type="primary", disabled=current.has_open_query, key="dept_query_approve", width="stretch"):
        _finish(*approve_scholar(engine, scholar_id, email))
    reason = st.text_area("Rejection reason", key="dept_query_reject_reason", disabled=current.has_open_query)
    if c3.button("Reject", disabled=current.has_open_query, key="dept_query_reject", width="stretch"):
        _finish(*reject_scholar(engine, scholar_id, reason, email))


@require_page("Department Portal")
def render():
    st.title(PAGE_TITLE)

    engine = st.session_state.get("engine")
    user = st.session_state.get("user") or {}
    if not (engine and user):
        st.error("User not found in session. Please log in again.")
        return

    profile = fetch_actor_profile(engine, user.get("email")) or {}
    faculty, department = _resolve_department(engine, profile)
    if not department:
        st.warning("No department is assigned to your account.")
        return
    st.caption(f"Department: **{department}**")

    try:
        records = as_records(_load(engine, faculty, department), ScholarRecord)
    except SQLAlchemyError as e:
        log.error(f"Loading department scholars failed for {department}: {e}")
        st.error(f"Could not load applications: {e}")
        records = None

    if records is not None:
        _render_stats(pipeline.scoped(records, department))

    can_edit = can_edit_page("Department Portal", user.get("roles") or set(), engine=engine)
    tab_apps, tab_queries = st.tabs(["Applications", "Queries"])

    with tab_apps:
        visible = render_table("department_applications", pipeline, records, department, COLUMNS)
        if visible and can_edit:
            _render_review_actions(engine, visible, user.get("email"))

    with tab_queries:
        queried = None if records is None else [r for r in records if r.in_query_flow]
        visible = render_table("department_queries", query_pipeline, queried, department, QUERY_COLUMNS)
        if visible and can_edit:
            _render_query_actions(engine, visible, user.get("email"))


if __name__ == "__main__":
    render()
