from __future__ import annotations
from sqlalchemy import text as sa_text
from core.schema_registry import register

def _ensure_column(conn, table, col, col_def):
    """Add column if it doesn't exist"""
    cols = conn.execute(sa_text(f"PRAGMA table_info({table});")).fetchall()
    if col.lower() in {str(c[1]).lower() for c in cols}:
        return
    conn.execute(sa_text(f"ALTER TABLE {table} ADD COLUMN {col} {col_def};"))

@register
def ensure_scholar_applications_schema(engine):
    """
    One row per scholarship application. faculty_forward is the newer routing
    column; older rows only carry faculty.
    """
    with engine.begin() as conn:
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS scholar_applications (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            application_no TEXT NOT NULL UNIQUE,
            registered_name TEXT,
            email TEXT,
            mobile TEXT,
            program TEXT,
            type TEXT,
            department TEXT,
            faculty TEXT,
            faculty_forward TEXT,
            faculty_status TEXT,
            status TEXT,
            dept_review TEXT DEFAULT 'Pending',
            dept_query TEXT,
            query_timestamp DATETIME,
            query_resolved_dept TEXT,
            reject_reason TEXT,
            cgpa REAL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )"""))
        conn.execute(sa_text("CREATE INDEX IF NOT EXISTS ix_scholar_app_faculty ON scholar_applications(faculty)"))
        # databases created before query resolution was tracked
        _ensure_column(conn, "scholar_applications", "query_timestamp", "DATETIME")
        _ensure_column(conn, "scholar_applications", "query_resolved_dept", "TEXT")
        conn.execute(sa_text("CREATE INDEX IF NOT EXISTS ix_scholar_app_faculty_status ON scholar_applications(faculty_status)"))
