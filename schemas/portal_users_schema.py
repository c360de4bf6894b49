from __future__ import annotations
from sqlalchemy import text as sa_text
from core.schema_registry import register

@register
def ensure_portal_users_schema(engine):
    """Credentials and scope (faculty / department) of everyone who can sign in."""
    with engine.begin() as conn:
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS portal_users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            name TEXT,
            phone_no TEXT,
            role TEXT NOT NULL,
            assigned_faculty TEXT,
            assigned_department TEXT,
            password_hash TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )"""))
        conn.execute(sa_text("CREATE INDEX IF NOT EXISTS ix_portal_users_role ON portal_users(role)"))
