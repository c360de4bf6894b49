# screens/department/db.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.activity_log import log_activity
from core.db import rows_as_dicts
from core.department_mapping import department_short_code, faculty_status_for, status_for_faculty
from core.records import ScholarRecord

log = logging.getLogger(__name__)

REVIEW_STATUSES = ("Approved", "Rejected", "Query", "Query Resolved", "Pending")


def fetch_department_scholars(engine: Engine, faculty: Optional[str], department: Optional[str]) -> List[Dict[str, Any]]:
    """Applications forwarded to the HOD's department; newest first."""
    code = department_short_code(department)
    if code == "UNKNOWN":
        log.warning("Could not derive a department code from %r", department)
        return []

    with engine.begin() as conn:
        rows = conn.execute(sa_text(r"""
            SELECT * FROM scholar_applications
             WHERE (status = :st AND faculty_status = :fs)
                OR faculty_status LIKE :suffix ESCAPE '\'
             ORDER BY created_at DESC, id DESC
        """), {
            "st": status_for_faculty(faculty) or "",
            "fs": faculty_status_for(code),
            # '_' is a LIKE wildcard: escape it so _CHE does not match OCHE
            "suffix": f"%\\_{code}",
        }).fetchall()
    log.debug("Fetched %d scholars for department %s", len(rows), code)
    return rows_as_dicts(rows)


# Decisions that close a review; blocked while a query is still open.
FINAL_STATUSES = ("Approved", "Rejected")
OPEN_QUERY_BLOCKED = "Resolve the open query before approving or rejecting"

# open = queried by the department and not answered yet
_OPEN_QUERY_SQL = "dept_review = 'Query' AND COALESCE(TRIM(query_resolved_dept), '') = ''"


def _get_review(conn, scholar_id: int) -> Optional[ScholarRecord]:
    row = conn.execute(sa_text("""
        SELECT id, application_no, department, dept_review, dept_query, query_resolved_dept
          FROM scholar_applications WHERE id=:i
    """), {"i": scholar_id}).fetchone()
    return ScholarRecord(dict(row._mapping)) if row else None


def _closing_changes(status: str) -> Dict[str, Any]:
    # query_resolved_dept is kept as the record that a query was answered
    changes: Dict[str, Any] = {"dept_review": status}
    if status in FINAL_STATUSES:
        changes.update(dept_query=None, query_timestamp=None)
    return changes


def _update_review(engine: Engine, scholar_id: int, changes: Dict[str, Any], actor_email: Optional[str], action: str) -> Tuple[bool, str]:
    assignments = ", ".join(f"{k}=:{k}" for k in changes)
    try:
        with engine.begin() as conn:
            current = _get_review(conn, scholar_id)
            if current is None:
                return False, "Scholar not found"
            if changes["dept_review"] in FINAL_STATUSES and current.has_open_query:
                log.info("Scholar %s has an open query; %s refused", scholar_id, changes["dept_review"])
                return False, OPEN_QUERY_BLOCKED
            conn.execute(
                sa_text(f"UPDATE scholar_applications SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=:id"),
                {**changes, "id": scholar_id},
            )
            if actor_email:
                log_activity(conn, actor_email, action, {"scholar_id": scholar_id, **changes})
    except SQLAlchemyError as e:
        log.error(f"Failed to update dept_review for scholar {scholar_id}: {e}")
        return False, f"Update failed: {e}"
    log.info("Scholar %s: %s", scholar_id, changes)
    return True, f"Review status set to {changes['dept_review']}"


def update_dept_review(engine: Engine, scholar_id: int, status: str, actor_email: Optional[str] = None) -> Tuple[bool, str]:
    if not scholar_id:
        return False, "Scholar ID is required"
    if status not in REVIEW_STATUSES:
        return False, f"Invalid review status: {status}"
    return _update_review(engine, scholar_id, _closing_changes(status), actor_email, "dept_review_updated")


def approve_scholar(engine: Engine, scholar_id: int, actor_email: Optional[str] = None) -> Tuple[bool, str]:
    return update_dept_review(engine, scholar_id, "Approved", actor_email)


def reject_scholar(engine: Engine, scholar_id: int, reason: str, actor_email: Optional[str] = None) -> Tuple[bool, str]:
    reason = (reason or "").strip()
    if not reason:
        return False, "Rejection reason is required"
    return _update_review(
        engine, scholar_id, {**_closing_changes("Rejected"), "reject_reason": reason}, actor_email, "scholar_rejected",
    )


def query_scholar(engine: Engine, scholar_id: int, query_text: str, actor_email: Optional[str] = None) -> Tuple[bool, str]:
    """Raise a new query; any earlier resolution is reset."""
    query_text = (query_text or "").strip()
    if not query_text:
        return False, "Query text is required"
    return _update_review(engine, scholar_id, {
        "dept_review": "Query",
        "dept_query": query_text,
        "query_timestamp": datetime.now().isoformat(sep=" ", timespec="seconds"),
        "query_resolved_dept": None,
    }, actor_email, "scholar_queried")


def resolve_query(engine: Engine, scholar_id: int, actor_email: Optional[str] = None) -> Tuple[bool, str]:
    """Mark an open query as answered so the application can be approved or rejected."""
    if not scholar_id:
        return False, "Scholar ID is required"
    try:
        with engine.begin() as conn:
            current = _get_review(conn, scholar_id)
            if current is None:
                return False, "Scholar not found"
            if not current.has_open_query:
                return False, "No open query for this scholar"
            resolved = f"resolved_to_{department_short_code(current.text('department'))}"
            conn.execute(sa_text("""
                UPDATE scholar_applications
                   SET dept_review='Query Resolved', query_resolved_dept=:r, updated_at=CURRENT_TIMESTAMP
                 WHERE id=:i
            """), {"r": resolved, "i": scholar_id})
            if actor_email:
                log_activity(conn, actor_email, "query_resolved", {
                    "scholar_id": scholar_id, "query_resolved_dept": resolved,
                })
    except SQLAlchemyError as e:
        log.error(f"Failed to resolve query for scholar {scholar_id}: {e}")
        return False, f"Update failed: {e}"
    log.info("Query resolved for scholar %s (%s)", scholar_id, resolved)
    return True, "Query marked as resolved"


def bulk_update_dept_review(engine: Engine, scholar_ids: Sequence[int], status: str, actor_email: Optional[str] = None) -> Tuple[bool, str]:
    """Final decisions skip scholars with an open query; the message reports how many."""
    if status not in REVIEW_STATUSES:
        return False, f"Invalid review status: {status}"
    ids = [int(i) for i in scholar_ids]
    if not ids:
        return False, "No scholars selected"
    params = {f"i{n}": v for n, v in enumerate(ids)}
    placeholders = ", ".join(f":{k}" for k in params)
    changes = _closing_changes(status)
    assignments = ", ".join(f"{k}=:{k}" for k in changes)
    guard = f" AND NOT ({_OPEN_QUERY_SQL})" if status in FINAL_STATUSES else ""
    try:
        with engine.begin() as conn:
            blocked = 0
            if guard:
                blocked = conn.execute(sa_text(
                    f"SELECT COUNT(*) FROM scholar_applications WHERE id IN ({placeholders}) AND {_OPEN_QUERY_SQL}"
                ), params).scalar() or 0
            result = conn.execute(sa_text(f"""
                UPDATE scholar_applications
                   SET {assignments}, updated_at=CURRENT_TIMESTAMP
                 WHERE id IN ({placeholders}){guard}
            """), {**changes, **params})
            if actor_email:
                log_activity(conn, actor_email, "dept_review_bulk_updated", {"ids": ids, "dept_review": status})
    except SQLAlchemyError as e:
        log.error(f"Bulk dept_review update failed: {e}")
        return False, f"Bulk update failed: {e}"
    log.info("Bulk set dept_review=%s on %d scholars (%d blocked)", status, result.rowcount, blocked)
    message = f"Updated {result.rowcount} scholar(s) to {status}"
    if blocked:
        message += f"; {blocked} skipped with an open query"
    return True, message
