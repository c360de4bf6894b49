# core/config_store.py
"""Versioned JSON config blobs keyed by (owner, namespace). Owner is a user email or '*'."""
from __future__ import annotations
import json
import logging
from typing import Optional, Tuple, List
from sqlalchemy import text as sql_text

log = logging.getLogger(__name__)

MAX_VERSIONS = 50  # per owner/namespace

def ensure_schema(engine):
    with engine.begin() as conn:
        conn.execute(sql_text("""
        CREATE TABLE IF NOT EXISTS configs_versions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner TEXT NOT NULL,
            namespace TEXT NOT NULL,
            version INTEGER NOT NULL,
            config_json TEXT NOT NULL,
            saved_by TEXT,
            reason TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(owner, namespace, version)
        );
        """))

def _put_current(conn, owner: str, namespace: str, cfg_json: str) -> None:
    conn.execute(sql_text("""
        INSERT INTO configs (owner, namespace, config_json)
        VALUES (:o, :ns, :cfg)
        ON CONFLICT(owner, namespace) DO UPDATE
        SET config_json=excluded.config_json, updated_at=CURRENT_TIMESTAMP
    """), {"o": owner, "ns": namespace, "cfg": cfg_json})

def _push_version(conn, owner: str, namespace: str, cfg_json: str, saved_by: Optional[str], reason: str) -> int:
    latest = conn.execute(sql_text(
        "SELECT COALESCE(MAX(version), 0) FROM configs_versions WHERE owner=:o AND namespace=:ns"
    ), {"o": owner, "ns": namespace}).scalar() or 0
    conn.execute(sql_text("""
        INSERT INTO configs_versions (owner, namespace, version, config_json, saved_by, reason)
        VALUES (:o, :ns, :v, :cfg, :by, :why)
    """), {"o": owner, "ns": namespace, "v": latest + 1, "cfg": cfg_json, "by": saved_by, "why": reason})
    return latest + 1

def _trim_history(conn, owner: str, namespace: str) -> int:
    stale = conn.execute(sql_text("""
        SELECT id FROM configs_versions
         WHERE owner=:o AND namespace=:ns
         ORDER BY version DESC
         LIMIT -1 OFFSET :keep
    """), {"o": owner, "ns": namespace, "keep": MAX_VERSIONS}).scalars().all()
    for stale_id in stale:
        conn.execute(sql_text("DELETE FROM configs_versions WHERE id=:i"), {"i": stale_id})
    return len(stale)

def get(engine, owner: str, namespace: str) -> dict:
    with engine.begin() as conn:
        raw = conn.execute(sql_text(
            "SELECT config_json FROM configs WHERE owner=:o AND namespace=:ns"
        ), {"o": owner, "ns": namespace}).scalar()
    if not raw:
        return {}
    try:
        return json.loads(raw) or {}
    except json.JSONDecodeError:
        log.warning("Corrupt config blob for %s/%s, ignoring", owner, namespace)
        return {}

def save(engine, owner: str, namespace: str, new_cfg: dict, saved_by: Optional[str] = None, reason: str = "") -> Tuple[int, dict]:
    """
    Store new_cfg as the current value. The value it replaces (if any) goes
    into history first. Returns (history version, previous value); the version
    is 0 when there was nothing to keep.
    """
    ensure_schema(engine)
    previous = get(engine, owner, namespace)
    version = 0
    with engine.begin() as conn:
        if previous:
            version = _push_version(conn, owner, namespace, json.dumps(previous, ensure_ascii=False),
                                    saved_by, reason or "auto-version")
        _put_current(conn, owner, namespace, json.dumps(new_cfg, ensure_ascii=False))
        dropped = _trim_history(conn, owner, namespace)
    if dropped:
        log.debug("Dropped %d old versions of %s/%s", dropped, owner, namespace)
    log.info("Saved config %s/%s by %s", owner, namespace, saved_by or "-")
    return version, previous

def history(engine, owner: str, namespace: str) -> List[dict]:
    ensure_schema(engine)
    with engine.begin() as conn:
        rows = conn.execute(sql_text("""
            SELECT version, saved_by, reason, created_at, config_json
              FROM configs_versions
             WHERE owner=:o AND namespace=:ns
             ORDER BY version DESC
        """), {"o": owner, "ns": namespace}).fetchall()
    return [
        {
            "version": r.version,
            "saved_by": r.saved_by,
            "reason": r.reason,
            "created_at": r.created_at,
            "config": json.loads(r.config_json) if r.config_json else {},
        }
        for r in rows
    ]

def rollback(engine, owner: str, namespace: str, version: int, saved_by: Optional[str] = None, reason: str = "rollback") -> bool:
    """Make an old version current again; the restore itself is recorded as a new version."""
    ensure_schema(engine)
    with engine.begin() as conn:
        cfg_json = conn.execute(sql_text("""
            SELECT config_json FROM configs_versions
             WHERE owner=:o AND namespace=:ns AND version=:v
        """), {"o": owner, "ns": namespace, "v": version}).scalar()
        if cfg_json is None:
            log.warning("No version %s of %s/%s to roll back to", version, owner, namespace)
            return False
        _put_current(conn, owner, namespace, cfg_json)
        _push_version(conn, owner, namespace, cfg_json, saved_by, reason)
        _trim_history(conn, owner, namespace)
    log.info("Rolled back config %s/%s to v%d", owner, namespace, version)
    return True
