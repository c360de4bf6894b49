from __future__ import annotations
from sqlalchemy import text as sa_text
from core.schema_registry import register

@register
def ensure_examination_records_schema(engine):
    with engine.begin() as conn:
        conn.execute(sa_text("""
        CREATE TABLE IF NOT EXISTS examination_records (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            scholar_id INTEGER,
            application_no TEXT,
            scholar_name TEXT,
            department TEXT,
            faculty TEXT,
            assigned_faculty TEXT,
            exam_status TEXT DEFAULT 'Pending',
            written_marks REAL,
            interview_marks REAL,
            total_marks REAL,
            director_interview TEXT,
            exam_date DATE,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(scholar_id) REFERENCES scholar_applications(id) ON DELETE SET NULL
        )"""))
        conn.execute(sa_text("CREATE INDEX IF NOT EXISTS ix_exam_records_faculty ON examination_records(faculty)"))
