# core/activity_log.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine, Connection
from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger(__name__)

def log_activity(engine_or_conn: Engine | Connection, actor_email: str, action: str, details: Optional[Dict[str, Any]] = None) -> bool:
    """Append one row to activity_logs. Failures are logged, never raised into the caller's write."""
    params = {
        "e": (actor_email or "").strip().lower(),
        "a": action,
        "d": json.dumps(details or {}, ensure_ascii=False, default=str),
    }
    sql = sa_text("INSERT INTO activity_logs(actor_email, action, details_json) VALUES(:e, :a, :d)")
    try:
        if isinstance(engine_or_conn, Engine):
            with engine_or_conn.begin() as conn:
                conn.execute(sql, params)
        else:
            engine_or_conn.execute(sql, params)
        return True
    except SQLAlchemyError:
        log.exception("Failed to record activity %s for %s", action, actor_email)
        return False

def activity_history(engine: Engine, actor_email: str, limit: int = 50) -> List[Dict[str, Any]]:
    with engine.begin() as conn:
        rows = conn.execute(sa_text("""
            SELECT id, action, details_json, created_at
              FROM activity_logs
             WHERE actor_email = :e
             ORDER BY created_at DESC, id DESC
             LIMIT :n
        """), {"e": (actor_email or "").strip().lower(), "n": int(limit)}).fetchall()
    out = []
    for r in rows:
        try:
            details = json.loads(r.details_json) if r.details_json else {}
        except json.JSONDecodeError:
            details = {"raw": r.details_json}
        out.append({"id": r.id, "action": r.action, "details": details, "created_at": r.created_at})
    return out
