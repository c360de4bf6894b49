from __future__ import annotations
from sqlalchemy import text as sa_text
from core.schema_registry import register

@register
def ensure_departments_schema(engine):
    with engine.begin() as conn:
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS departments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            department_code TEXT NOT NULL UNIQUE,
            department_name TEXT NOT NULL,
            faculty TEXT NOT NULL,
            hod_name TEXT,
            hod_email TEXT,
            contact_no TEXT
        )"""))
        conn.execute(sa_text("CREATE INDEX IF NOT EXISTS ix_departments_faculty ON departments(faculty)"))
