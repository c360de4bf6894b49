# core/db.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List
from sqlalchemy import create_engine, event, text as sa_text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from core.schema_registry import auto_discover, run_all

log = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).resolve().parents[1] / "schemas"

def get_engine(db_url: str) -> Engine:
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every checkout sees an empty database
        engine = create_engine(
            db_url, future=True,
            connect_args={"check_same_thread": False}, poolclass=StaticPool,
        )
    else:
        if db_url.startswith("sqlite:///"):
            db_file = db_url.replace("sqlite:///", "")
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(db_url, future=True)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()
    return engine

def init_db(engine: Engine) -> None:
    # configs backs config_store and the per-user theme preference
    with engine.begin() as conn:
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS configs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner TEXT NOT NULL DEFAULT '*',
            namespace TEXT NOT NULL,
            config_json TEXT NOT NULL,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(owner, namespace)
        )"""))

    auto_discover(SCHEMAS_DIR, root_package=None)
    run_all(engine)
    log.info("Database initialised (%s)", engine.url.render_as_string(hide_password=True))

def rows_as_dicts(rows) -> List[Dict[str, Any]]:
    return [dict(r._mapping) for r in rows]
