# core/rbac.py
from __future__ import annotations
import logging
from typing import Optional, Set, Union
import streamlit as st
from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine, Connection
from core.settings import load_settings
from core.db import get_engine

__all__ = ["user_roles", "upsert_user", "get_user_id", "grant_role", "revoke_role"]

log = logging.getLogger(__name__)

def _ensure_engine(engine: Optional[Engine] = None) -> Engine:
    if engine: return engine
    if "engine" in st.session_state: return st.session_state.engine
    settings = load_settings()
    eng = get_engine(settings.db.url)
    st.session_state.engine = eng
    return eng

def _role_id(conn: Connection, role_name: str) -> Optional[int]:
    conn.execute(sa_text("INSERT OR IGNORE INTO roles(name) VALUES(:n)"), {"n": role_name})
    row = conn.execute(sa_text("SELECT id FROM roles WHERE name=:n"), {"n": role_name}).fetchone()
    return int(row[0]) if row else None

def user_roles(engine: Optional[Engine], email: Optional[str]) -> Set[str]:
    if not email:
        return {"public"}
    engine = _ensure_engine(engine)
    with engine.begin() as conn:
        rows = conn.execute(sa_text("""
            SELECT r.name
              FROM users u
              JOIN user_roles ur ON ur.user_id = u.id
              JOIN roles r ON r.id = ur.role_id
             WHERE LOWER(u.email)=LOWER(:e) AND u.active=1
        """), {"e": email}).fetchall()
    return {r[0] for r in rows}

def upsert_user(email: str, full_name: str = "", active: bool = True, engine: Optional[Engine] = None) -> int:
    engine = _ensure_engine(engine)
    with engine.begin() as conn:
        conn.execute(
            sa_text("INSERT OR IGNORE INTO users(email, full_name, active) VALUES(:e, :n, :a)"),
            {"e": email.lower(), "n": full_name, "a": 1 if active else 0}
        )
        conn.execute(
            sa_text("UPDATE users SET full_name=:n, active=:a WHERE LOWER(email)=LOWER(:e)"),
            {"n": full_name, "a": 1 if active else 0, "e": email}
        )
        return get_user_id(conn, email)

def get_user_id(engine_or_conn: Union[Engine, Connection], email: str) -> int:
    if isinstance(engine_or_conn, Engine):
        with engine_or_conn.begin() as conn:
            return get_user_id(conn, email)
    row = engine_or_conn.execute(sa_text("SELECT id FROM users WHERE LOWER(email)=LOWER(:e)"), {"e": email}).fetchone()
    if not row: raise ValueError(f"User not found: {email}")
    return int(row[0])

def _count_holders(conn: Connection, role_name: str) -> int:
    row = conn.execute(sa_text("""
        SELECT COUNT(*) FROM user_roles ur JOIN roles r ON r.id = ur.role_id WHERE r.name=:r
    """), {"r": role_name}).fetchone()
    return int(row[0]) if row else 0

def grant_role(email: str, role_name: str, engine: Optional[Engine] = None) -> None:
    engine = _ensure_engine(engine)
    with engine.begin() as conn:
        uid = get_user_id(conn, email)
        rid = _role_id(conn, role_name)
        conn.execute(sa_text("INSERT OR IGNORE INTO user_roles(user_id, role_id) VALUES (:u, :rid)"), {"u": uid, "rid": rid})
    log.info("Granted %s to %s", role_name, email)

def revoke_role(email: str, role_name: str, engine: Optional[Engine] = None) -> None:
    engine = _ensure_engine(engine)
    with engine.begin() as conn:
        uid = get_user_id(conn, email)
        rid = _role_id(conn, role_name)
        held = conn.execute(sa_text("SELECT 1 FROM user_roles WHERE user_id=:u AND role_id=:rid"), {"u": uid, "rid": rid}).fetchone()
        if role_name == "superadmin" and held and _count_holders(conn, "superadmin") <= 1:
            raise RuntimeError("Cannot revoke the only remaining superadmin.")
        conn.execute(sa_text("DELETE FROM user_roles WHERE user_id=:u AND role_id=:rid"), {"u": uid, "rid": rid})
    log.info("Revoked %s from %s", role_name, email)
