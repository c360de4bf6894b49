from __future__ import annotations
from sqlalchemy import text as sa_text
from core.schema_registry import register

ROLE_NAMES = ("superadmin", "research_coordinator", "hod")

@register
def ensure_rbac_schema(engine):
    with engine.begin() as conn:
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            full_name TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )"""))
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS roles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        )"""))
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS user_roles (
            user_id INTEGER NOT NULL,
            role_id INTEGER NOT NULL,
            UNIQUE(user_id, role_id),
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
            FOREIGN KEY(role_id) REFERENCES roles(id) ON DELETE CASCADE
        )"""))
        conn.execute(sa_text("CREATE INDEX IF NOT EXISTS ix_user_roles_user ON user_roles(user_id)"))
        for name in ROLE_NAMES:
            conn.execute(sa_text("INSERT OR IGNORE INTO roles(name) VALUES(:n)"), {"n": name})
