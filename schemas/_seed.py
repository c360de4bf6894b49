# schemas/_seed.py
from __future__ import annotations

import logging
import os

from sqlalchemy import text as sa_text

from core.auth import hash_password
from core.department_mapping import ENGINEERING, MANAGEMENT, faculty_status_for, status_for_faculty
from core.schema_registry import register
from core.settings import load_settings

log = logging.getLogger(__name__)

SEED_SHOULD_RUN = os.getenv("SEED_RUN", "1").lower() not in ("0", "false")

# ──────────────────────────────────────────────────────────────────────────────
# Demo accounts: email -> (name, role, faculty, department)
# ──────────────────────────────────────────────────────────────────────────────

DEMO_USERS = {
    os.getenv("SEED_SUPERADMIN_EMAIL", "admin@example.com").lower(): ("Super Admin", "superadmin", None, None),
    "coordinator.foet@example.com": ("Rajesh Pillai", "research_coordinator", ENGINEERING, None),
    "coordinator.fom@example.com": ("Meena Iyer", "research_coordinator", MANAGEMENT, None),
    "hod.cse@example.com": ("Dr. Anand", "hod", ENGINEERING, "Computer Science and Engineering"),
    "hod.mech@example.com": ("Dr. Chandru", "hod", ENGINEERING, "Mechanical Engineering"),
}

DEPARTMENTS = [
    ("CSE", "Computer Science and Engineering", ENGINEERING, "Dr. Anand", "hod.cse@example.com"),
    ("ECE", "Electronics and Communication Engineering", ENGINEERING, "Dr. Baskar", None),
    ("MECH", "Mechanical Engineering", ENGINEERING, "Dr. Chandru", "hod.mech@example.com"),
    ("CIVIL", "Civil Engineering", ENGINEERING, "Dr. Eswar", None),
    ("MBA", "Management Studies", MANAGEMENT, "Dr. Latha", None),
]

_ENG_FORWARD = status_for_faculty(ENGINEERING)

# application_no, name, email, program, type, department, faculty, faculty_forward, faculty_status, status, dept_review, cgpa
SCHOLARS = [
    ("APP001", "Ananya Rao", "ananya.r@example.com", "Ph.D. - Computer Science and Engineering (Full Time)", "Full Time",
     "Computer Science and Engineering", ENGINEERING, ENGINEERING, faculty_status_for("CSE"), _ENG_FORWARD, "Pending", 8.5),
    ("APP004", "Divya Singh", "divya.s@example.com", "Ph.D. - Mechanical Engineering", "Full Time",
     "Mechanical Engineering", ENGINEERING, ENGINEERING, faculty_status_for("MECH"), _ENG_FORWARD, "Approved", 9.1),
    ("APP006", "Priya Venkatesh", "priya.v@example.com", "Ph.D. - Electronics and Communication Engineering", "Full Time",
     "Electronics and Communication Engineering", ENGINEERING, None, None, _ENG_FORWARD, "Pending", 8.8),
    ("APP010", "Fatima Sheikh", "fatima.s@example.com", "Ph.D. - Computer Science and Engineering (Part Time)", "Part Time External",
     "Computer Science and Engineering", ENGINEERING, ENGINEERING, faculty_status_for("CSE"), _ENG_FORWARD, "Query", 8.2),
    ("APP011", "Rahul Kumar", "rahul.k@example.com", "Ph.D. - Civil Engineering", "Part Time Internal",
     "Civil Engineering", ENGINEERING, "Back_To_Director", None, _ENG_FORWARD, "Rejected", 7.8),
    ("APP013", "Kavya Reddy", "kavya.r@example.com", "Ph.D. - Management Studies", "Full Time",
     "Management Studies", MANAGEMENT, MANAGEMENT, None, status_for_faculty(MANAGEMENT), "Pending", 8.1),
]

# queries raised by the department and still waiting on the scholar
OPEN_QUERIES = {
    "APP010": "Please upload the employer NOC for part-time study.",
}

# application_no, department, faculty, assigned_faculty, exam_status, written, interview
EXAMS = [
    ("APP001", "Computer Science and Engineering", ENGINEERING, None, "Scheduled", None, None),
    ("APP004", "Mechanical Engineering", ENGINEERING, ENGINEERING, "Completed", 62, 28),
    ("APP010", "Computer Science and Engineering", None, ENGINEERING, "Pending", None, None),
    ("APP013", "Management Studies", MANAGEMENT, None, "Cancelled", None, None),
]


def _ensure_user(conn, email: str, full_name: str, role: str) -> None:
    conn.execute(
        sa_text("INSERT OR IGNORE INTO users(email, full_name, active) VALUES(:e, :n, 1)"),
        {"e": email, "n": full_name},
    )
    conn.execute(sa_text("INSERT OR IGNORE INTO roles(name) VALUES(:r)"), {"r": role})
    conn.execute(sa_text("""
        INSERT OR IGNORE INTO user_roles(user_id, role_id)
        SELECT u.id, r.id FROM users u, roles r WHERE u.email=:e AND r.name=:r
    """), {"e": email, "r": role})


@register
def seed_demo_data(engine):
    """
    Demo accounts, departments and a handful of applications.
    Idempotent; set SEED_RUN=0 to skip.
    """
    if not SEED_SHOULD_RUN:
        return

    with engine.begin() as conn:
        already = conn.execute(sa_text("SELECT COUNT(*) FROM portal_users")).scalar() or 0
        if already:
            return

        auth = load_settings().auth
        password = os.getenv("SEED_DEMO_PASSWORD") or auth.demo_password
        pw_hash = hash_password(password, rounds=auth.bcrypt_rounds)
        for email, (name, role, faculty, department) in DEMO_USERS.items():
            _ensure_user(conn, email, name, role)
            conn.execute(sa_text("""
                INSERT OR IGNORE INTO portal_users(email, name, role, assigned_faculty, assigned_department, password_hash)
                VALUES(:e, :n, :r, :f, :d, :ph)
            """), {"e": email, "n": name, "r": role, "f": faculty, "d": department, "ph": pw_hash})

        for code, name, faculty, hod_name, hod_email in DEPARTMENTS:
            conn.execute(sa_text("""
                INSERT OR IGNORE INTO departments(department_code, department_name, faculty, hod_name, hod_email)
                VALUES(:c, :n, :f, :hn, :he)
            """), {"c": code, "n": name, "f": faculty, "hn": hod_name, "he": hod_email})

        for (app_no, name, email, program, mode, dept, faculty, forward, fstatus, status, review, cgpa) in SCHOLARS:
            conn.execute(sa_text("""
                INSERT OR IGNORE INTO scholar_applications(
                    application_no, registered_name, email, program, type, department,
                    faculty, faculty_forward, faculty_status, status, dept_review, cgpa)
                VALUES(:no, :name, :email, :program, :mode, :dept, :faculty, :forward, :fstatus, :status, :review, :cgpa)
            """), {
                "no": app_no, "name": name, "email": email, "program": program, "mode": mode,
                "dept": dept, "faculty": faculty, "forward": forward, "fstatus": fstatus,
                "status": status, "review": review, "cgpa": cgpa,
            })

        for app_no, query in OPEN_QUERIES.items():
            conn.execute(sa_text("""
                UPDATE scholar_applications
                   SET dept_query=:q, query_timestamp=CURRENT_TIMESTAMP
                 WHERE application_no=:no AND dept_review='Query'
            """), {"q": query, "no": app_no})

        for (app_no, dept, faculty, assigned, exam_status, written, interview) in EXAMS:
            total = (written or 0) + (interview or 0) if written is not None else None
            conn.execute(sa_text("""
                INSERT INTO examination_records(
                    scholar_id, application_no, scholar_name, department, faculty,
                    assigned_faculty, exam_status, written_marks, interview_marks, total_marks)
                SELECT id, application_no, registered_name, :dept, :faculty, :assigned, :st, :w, :i, :t
                  FROM scholar_applications WHERE application_no=:no
            """), {"no": app_no, "dept": dept, "faculty": faculty, "assigned": assigned,
                   "st": exam_status, "w": written, "i": interview, "t": total})

    log.info("Seeded demo data (%d users, %d applications)", len(DEMO_USERS), len(SCHOLARS))
