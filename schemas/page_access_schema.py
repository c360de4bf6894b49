from __future__ import annotations
from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine

from core.schema_registry import register

ALL_SIGNED_IN = {"superadmin", "research_coordinator", "hod"}

# page name -> permission type -> roles
DEFAULT_PAGE_ACCESS = {
    "Login":  {"view": {"public"}},
    "Logout": {"view": {"public"}},
    "Profile": {
        "view": ALL_SIGNED_IN,
        "edit": ALL_SIGNED_IN,
    },
    "Settings": {
        "view": ALL_SIGNED_IN,
        "edit": ALL_SIGNED_IN,
    },
    "Faculty Dashboard": {
        "view": {"superadmin", "research_coordinator"},
        "edit": set(),
    },
    "Scholar Workflow": {
        "view": {"superadmin", "research_coordinator"},
        "edit": {"research_coordinator"},
    },
    "Examination Workflow": {
        "view": {"superadmin", "research_coordinator"},
        "edit": set(),
    },
    "Department Portal": {
        "view": {"superadmin", "hod"},
        "edit": {"hod"},
    },
}


@register
def ensure_page_access_schema(engine: Engine):
    """
    Creates 'page_access_rules' and upserts DEFAULT_PAGE_ACCESS (INSERT OR IGNORE),
    so pages added later get rules on existing databases too.
    """
    with engine.begin() as conn:
        conn.execute(sa_text("""
            CREATE TABLE IF NOT EXISTS page_access_rules (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                page_name TEXT NOT NULL,
                permission_type TEXT NOT NULL, -- 'view' or 'edit'
                role_name TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                created_by TEXT,
                UNIQUE(page_name, permission_type, role_name)
            )
        """))

        for page, permissions in DEFAULT_PAGE_ACCESS.items():
            for perm_type, roles in permissions.items():
                for role in sorted(roles):
                    conn.execute(
                        sa_text("""
                            INSERT OR IGNORE INTO page_access_rules
                                (page_name, permission_type, role_name, created_by)
                            VALUES (:page, :perm, :role, 'system_migration')
                        """),
                        {"page": page, "perm": perm_type, "role": role},
                    )
