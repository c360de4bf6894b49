# screens/workflow/main.py
from __future__ import annotations

import logging
from typing import List, Optional

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from core.department_mapping import FACULTIES
from core.policy import can_edit_page, can_view_page, require_page
from core.profile_service import actor_scope, fetch_actor_profile
from core.projection import EXAMINATION_WORKFLOW, SCHOLAR_WORKFLOW, ProjectionPipeline
from core.records import ExaminationRecord, Record, ScholarRecord, as_records
from core.ui import show_result
from screens.workflow.db import batch_forward, fetch_faculty_examinations, fetch_faculty_scholars
from screens.workflow.table import render_table

log = logging.getLogger(__name__)

PAGE_TITLE = "🗂️ Workflow"

SCHOLAR_COLUMNS = [
    ("application_no", "Application No"),
    ("registered_name", "Scholar Name"),
    ("department", "Department"),
    ("type", "Mode"),
    ("dept_review", "Department Status"),
    ("faculty_status", "Routing"),
]

EXAM_COLUMNS = [
    ("application_no", "Application No"),
    ("scholar_name", "Scholar Name"),
    ("department", "Department"),
    ("exam_status", "Exam Status"),
    ("written_marks", "Written"),
    ("interview_marks", "Interview"),
    ("total_marks", "Total"),
]

scholar_pipeline = ProjectionPipeline(SCHOLAR_WORKFLOW)
exam_pipeline = ProjectionPipeline(EXAMINATION_WORKFLOW)


@st.cache_data(ttl=60)
def _load_scholars(_engine, faculty: str):
    return fetch_faculty_scholars(_engine, faculty)


@st.cache_data(ttl=60)
def _load_examinations(_engine, faculty: str):
    return fetch_faculty_examinations(_engine, faculty)


def _load(loader, engine, faculty: str, kind) -> Optional[List[Record]]:
    try:
        with st.spinner("Loading records..."):
            return as_records(loader(engine, faculty), kind)
    except SQLAlchemyError as e:
        log.error(f"Loading workflow records failed for {faculty}: {e}")
        st.error(f"Could not load records: {e}")
        return None


def _resolve_scope(engine, user: dict) -> str:
    """Coordinator's own faculty; superadmins pick one."""
    scope = actor_scope(fetch_actor_profile(engine, user.get("email")))
    if scope:
        st.caption(f"Faculty: **{scope}**")
        return scope
    return st.selectbox("Faculty", FACULTIES, key="workflow_faculty_picker")


def _render_forward_actions(engine, visible: List[ScholarRecord], email: str):
    pending = [r for r in visible if not r.is_forwarded]
    if not pending:
        return
    with st.expander(f"➡️ Forward to department ({len(pending)} pending)"):
        labels = {r.key: f"{r.application_no} · {r.name} · {r.text('department')}" for r in pending}
        picked = st.multiselect("Scholars", list(labels), format_func=labels.get, key="workflow_forward_pick")
        if st.button("Forward selected", type="primary", disabled=not picked, key="workflow_forward_btn"):
            outcome = batch_forward(engine, picked, email)
            for r in outcome["results"]:
                show_result(r["ok"], r["message"])
            if outcome["forwarded"]:
                _load_scholars.clear()
            st.info(f"Forwarded {outcome['forwarded']}, failed {outcome['failed']}.")


@require_page("Scholar Workflow")
def render():
    st.title(PAGE_TITLE)

    engine = st.session_state.get("engine")
    user = st.session_state.get("user") or {}
    if not (engine and user):
        st.error("User not found in session. Please log in again.")
        return

    roles = user.get("roles") or set()
    scope = _resolve_scope(engine, user)

    tab_scholars, tab_exams = st.tabs(["Scholar Administration", "Examination"])

    with tab_scholars:
        records = _load(_load_scholars, engine, scope, ScholarRecord)
        visible = render_table("scholar_workflow", scholar_pipeline, records, scope, SCHOLAR_COLUMNS)
        if visible and can_edit_page("Scholar Workflow", roles, engine=engine):
            _render_forward_actions(engine, visible, user.get("email"))

    with tab_exams:
        if not can_view_page("Examination Workflow", roles, engine=engine):
            st.info("You do not have access to examination records.")
            return
        records = _load(_load_examinations, engine, scope, ExaminationRecord)
        render_table("examination_workflow", exam_pipeline, records, scope, EXAM_COLUMNS)


if __name__ == "__main__":
    render()
