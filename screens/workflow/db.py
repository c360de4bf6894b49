# screens/workflow/db.py
"""
Faculty-level reads and writes behind the coordinator's workflow screen.

Reads return plain dicts (the screen wraps them in records); writes return
(ok, message) so the screen can show the outcome.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import text as sa_text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.activity_log import log_activity
from core.db import rows_as_dicts
from core.department_mapping import (
    ENGINEERING, MANAGEMENT, MEDICAL, SCIENCE,
    faculty_status_for, forwarding_status, status_for_faculty, validate_for_forwarding,
)

log = logging.getLogger(__name__)

BACK_TO_DIRECTOR = "Back_To_Director"

# Spellings found in imported data for each faculty.
FACULTY_VARIANTS: Dict[str, Tuple[str, ...]] = {
    ENGINEERING: (ENGINEERING, "Engineering And Technology"),
    SCIENCE: (SCIENCE, "Science And Humanities"),
    MANAGEMENT: (MANAGEMENT, "Management"),
    MEDICAL: (
        MEDICAL, "Faculty of Medical and Health Sciences",
        "Medical And Health Sciences", "Medical and Health Sciences",
    ),
}


def canonical_faculty(name: Optional[str]) -> Optional[str]:
    if not name:
        return name
    for canonical, variants in FACULTY_VARIANTS.items():
        if name in variants:
            return canonical
    return name


def faculty_variants(faculty: str) -> Tuple[str, ...]:
    return FACULTY_VARIANTS.get(canonical_faculty(faculty) or "", (faculty,))


def _in_clause(prefix: str, values: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
    names = [f"{prefix}{i}" for i in range(len(values))]
    return ", ".join(f":{n}" for n in names), dict(zip(names, values))


# -----------------------------
# Reads
# -----------------------------

def fetch_faculty_scholars(engine: Engine, faculty: Optional[str]) -> List[Dict[str, Any]]:
    """Applications forwarded to `faculty`, plus the ones sent back to the director; newest first."""
    if not faculty:
        return []
    faculty = canonical_faculty(faculty)
    with engine.begin() as conn:
        rows = conn.execute(sa_text("""
            SELECT * FROM scholar_applications
             WHERE (status = :st AND faculty = :f)
                OR (faculty_forward = :back AND faculty = :f)
             ORDER BY created_at DESC, id DESC
        """), {"st": status_for_faculty(faculty), "f": faculty, "back": BACK_TO_DIRECTOR}).fetchall()
    log.debug("Fetched %d scholars for %s", len(rows), faculty)
    return rows_as_dicts(rows)


def fetch_faculty_examinations(engine: Engine, faculty: Optional[str]) -> List[Dict[str, Any]]:
    """Examination rows whose faculty (or assigned faculty) is any spelling of `faculty`."""
    if not faculty:
        return []
    variants = faculty_variants(faculty)
    placeholders, params = _in_clause("v", variants)
    with engine.begin() as conn:
        rows = conn.execute(sa_text(f"""
            SELECT * FROM examination_records
             WHERE faculty IN ({placeholders})
                OR assigned_faculty IN ({placeholders})
             ORDER BY created_at DESC, id DESC
        """), params).fetchall()
    out = rows_as_dicts(rows)
    for r in out:
        r["faculty"] = canonical_faculty(r.get("faculty"))
        r["assigned_faculty"] = canonical_faculty(r.get("assigned_faculty"))
    return out


def fetch_departments(engine: Engine, faculty: Optional[str] = None) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM departments"
    params: Dict[str, Any] = {}
    if faculty:
        placeholders, params = _in_clause("v", faculty_variants(faculty))
        sql += f" WHERE faculty IN ({placeholders})"
    sql += " ORDER BY department_name"
    with engine.begin() as conn:
        return rows_as_dicts(conn.execute(sa_text(sql), params).fetchall())


def _get_scholar(conn: Connection, scholar_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        sa_text("SELECT * FROM scholar_applications WHERE id=:i"), {"i": scholar_id}
    ).fetchone()
    return dict(row._mapping) if row else None


# -----------------------------
# Writes
# -----------------------------

def forward_scholar_to_department(engine: Engine, scholar_id: int, actor_email: str) -> Tuple[bool, str]:
    """Route one application to the department its program belongs to."""
    try:
        with engine.begin() as conn:
            scholar = _get_scholar(conn, scholar_id)
            check = validate_for_forwarding(scholar)
            if not check["can_forward"]:
                return False, check["error"]

            code = check["department"]
            conn.execute(sa_text("""
                UPDATE scholar_applications
                   SET faculty_status=:fs,
                       status=COALESCE(:st, status),
                       updated_at=CURRENT_TIMESTAMP
                 WHERE id=:i
            """), {"fs": faculty_status_for(code), "st": forwarding_status(code), "i": scholar_id})
            log_activity(conn, actor_email, "scholar_forwarded", {
                "scholar_id": scholar_id,
                "application_no": scholar.get("application_no"),
                "department": code,
            })
    except SQLAlchemyError as e:
        log.error(f"Failed to forward scholar {scholar_id}: {e}")
        return False, f"Forwarding failed: {e}"

    log.info("Scholar %s forwarded to %s by %s", scholar_id, code, actor_email)
    return True, f"{scholar.get('registered_name') or scholar.get('application_no')} forwarded to {code}"


def batch_forward(engine: Engine, scholar_ids: Sequence[int], actor_email: str) -> Dict[str, Any]:
    """Forward each id on its own; one failure does not stop the rest."""
    results = []
    for sid in scholar_ids:
        ok, msg = forward_scholar_to_department(engine, sid, actor_email)
        results.append({"id": sid, "ok": ok, "message": msg})
    failed = sum(1 for r in results if not r["ok"])
    if failed:
        log.warning("Batch forward: %d of %d failed", failed, len(results))
    return {"forwarded": len(results) - failed, "failed": failed, "results": results}
