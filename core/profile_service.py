# core/profile_service.py
"""
Signed-in actor's profile: fetch-by-key, update-by-key and the scope value
that drives the workflow tables.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.activity_log import log_activity
from core.department_mapping import department_short_code

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "phone_no")


def fetch_actor_profile(engine: Engine, email: Optional[str]) -> Optional[Dict[str, Any]]:
    if not email:
        return None
    with engine.begin() as conn:
        row = conn.execute(sa_text("""
            SELECT id, email, name, phone_no, role, assigned_faculty, assigned_department, updated_at
              FROM portal_users
             WHERE LOWER(email)=LOWER(:e) AND active=1
        """), {"e": email.strip()}).fetchone()
    if not row:
        log.warning("No portal user record for %s", email)
        return None
    profile = dict(row._mapping)
    profile["department_code"] = (
        department_short_code(profile["assigned_department"]) if profile.get("assigned_department") else None
    )
    return profile


def update_actor_profile(engine: Engine, email: str, updates: Mapping[str, Any]) -> Tuple[bool, str]:
    unknown = set(updates) - set(EDITABLE_FIELDS)
    if unknown:
        return False, f"Cannot update field(s): {', '.join(sorted(unknown))}"
    clean = {k: (str(v).strip() if v is not None else None) for k, v in updates.items()}
    if "name" in clean and not clean["name"]:
        return False, "Name cannot be empty"
    if not clean:
        return False, "Nothing to update"

    assignments = ", ".join(f"{k}=:{k}" for k in clean)
    try:
        with engine.begin() as conn:
            result = conn.execute(
                sa_text(f"UPDATE portal_users SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE LOWER(email)=LOWER(:email)"),
                {**clean, "email": email},
            )
            if result.rowcount == 0:
                return False, "User not found"
            if "name" in clean:
                conn.execute(sa_text("UPDATE users SET full_name=:n WHERE LOWER(email)=LOWER(:e)"), {"n": clean["name"], "e": email})
            log_activity(conn, email, "profile_updated", {"fields": sorted(clean)})
    except SQLAlchemyError as e:
        log.error(f"Failed to update profile for {email}: {e}")
        return False, f"Update failed: {e}"

    log.info("Profile updated for %s", email)
    return True, "Profile updated"


def actor_scope(profile: Optional[Mapping[str, Any]]) -> str:
    """Faculty for coordinators, department for HODs, "" for anyone else."""
    if not profile:
        return ""
    role = profile.get("role")
    if role == "research_coordinator":
        return profile.get("assigned_faculty") or ""
    if role == "hod":
        return profile.get("assigned_department") or ""
    return ""
