# core/auth.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
import bcrypt
import streamlit as st
from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine

from core.activity_log import log_activity
from core.rbac import user_roles

log = logging.getLogger(__name__)

KEYS_KEPT_ON_SIGN_OUT = ("engine", "db_initialized")

def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not (password and password_hash):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in the table
        log.warning("Stored password hash is not a valid bcrypt hash")
        return False

def authenticate(engine: Engine, email: str, password: str) -> Optional[Dict[str, Any]]:
    """Session user dict for valid credentials, else None."""
    email = (email or "").strip().lower()
    if not email:
        return None
    with engine.begin() as conn:
        row = conn.execute(sa_text("""
            SELECT id, email, name, role, assigned_faculty, assigned_department, password_hash
              FROM portal_users
             WHERE LOWER(email)=:e AND active=1
        """), {"e": email}).fetchone()
    if not row or not verify_password(password, row.password_hash):
        log.info("Failed sign-in for %s", email)
        return None

    roles = user_roles(engine, email) or {row.role}
    log_activity(engine, email, "signed_in")
    log.info("Signed in %s (%s)", email, ", ".join(sorted(roles)))
    return {
        "user_id": row.id,
        "email": row.email,
        "full_name": row.name,
        "role": row.role,
        "roles": roles,
        "assigned_faculty": row.assigned_faculty,
        "assigned_department": row.assigned_department,
    }

def sign_out() -> Optional[str]:
    """Clear the session (view states included) except the engine. Returns the signed-out email."""
    email = (st.session_state.get("user") or {}).get("email")
    for key in list(st.session_state.keys()):
        if key not in KEYS_KEPT_ON_SIGN_OUT:
            del st.session_state[key]
    if email:
        log.info("Signed out %s", email)
    return email
