from sqlalchemy import text as sa_text

from core.activity_log import activity_history
from core.dashboard_stats import department_statistics
from core.records import ScholarRecord, as_records
from core.department_mapping import ENGINEERING, MANAGEMENT, department_short_code
from screens.department.db import (
    OPEN_QUERY_BLOCKED, approve_scholar, bulk_update_dept_review, fetch_department_scholars, query_scholar,
    reject_scholar, resolve_query, update_dept_review,
)

HOD = "hod.cse@example.com"
CSE = "Computer Science and Engineering"


def _row(engine, sid):
    with engine.begin() as conn:
        return conn.execute(
            sa_text("SELECT dept_review, dept_query, query_resolved_dept, reject_reason FROM scholar_applications WHERE id=:i"), {"i": sid}
        ).fetchone()


def test_fetch_for_cse_hod(engine):
    rows = fetch_department_scholars(engine, ENGINEERING, CSE)
    assert [r["application_no"] for r in rows] == ["APP010", "APP001"]
    stats = department_statistics(as_records(rows, ScholarRecord))
    assert (stats["total"], stats["pending"], stats["query"]) == (2, 1, 1)


def test_fetch_for_mech_hod(engine):
    rows = fetch_department_scholars(engine, ENGINEERING, "Mechanical Engineering")
    assert [(r["application_no"], r["dept_review"]) for r in rows] == [("APP004", "Approved")]


def test_fetch_without_department(engine):
    assert fetch_department_scholars(engine, ENGINEERING, None) == []
    assert fetch_department_scholars(engine, ENGINEERING, "") == []


def test_unforwarded_applications_stay_hidden(engine):
    assert department_short_code("Management Studies") == "MBA"
    assert fetch_department_scholars(engine, MANAGEMENT, "Management Studies") == []


def test_suffix_match_does_not_leak_across_codes(engine):
    with engine.begin() as conn:
        conn.execute(sa_text("""
            INSERT INTO scholar_applications(application_no, registered_name, faculty_status, status)
            VALUES ('APP090', 'Other Dept', 'FORWARDED_TO_XCSE', 'Forwarded to Science')
        """))
    rows = fetch_department_scholars(engine, ENGINEERING, CSE)
    assert "APP090" not in [r["application_no"] for r in rows]


def test_update_dept_review(engine, scholar_id):
    sid = scholar_id("APP001")
    assert update_dept_review(engine, sid, "Query Resolved", HOD) == (True, "Review status set to Query Resolved")
    assert _row(engine, sid).dept_review == "Query Resolved"
    entry = activity_history(engine, HOD)[0]
    assert entry["action"] == "dept_review_updated"
    assert entry["details"] == {"scholar_id": sid, "dept_review": "Query Resolved"}


def test_update_dept_review_validation(engine, scholar_id):
    assert update_dept_review(engine, None, "Approved") == (False, "Scholar ID is required")
    assert update_dept_review(engine, scholar_id("APP001"), "Maybe") == (False, "Invalid review status: Maybe")
    assert update_dept_review(engine, 424242, "Approved") == (False, "Scholar not found")


def test_approve_without_actor_logs_nothing(engine, scholar_id):
    sid = scholar_id("APP001")
    ok, _ = approve_scholar(engine, sid)
    assert ok
    assert _row(engine, sid).dept_review == "Approved"
    assert activity_history(engine, HOD) == []


def test_reject_requires_reason(engine, scholar_id):
    sid = scholar_id("APP001")
    assert reject_scholar(engine, sid, "   ", HOD) == (False, "Rejection reason is required")
    ok, msg = reject_scholar(engine, sid, " Incomplete transcripts ", HOD)
    assert (ok, msg) == (True, "Review status set to Rejected")
    row = _row(engine, sid)
    assert (row.dept_review, row.reject_reason) == ("Rejected", "Incomplete transcripts")
    assert activity_history(engine, HOD)[0]["action"] == "scholar_rejected"


def test_query_requires_text(engine, scholar_id):
    sid = scholar_id("APP001")
    assert query_scholar(engine, sid, "", HOD) == (False, "Query text is required")
    assert query_scholar(engine, sid, "Upload the NOC", HOD)[0]
    row = _row(engine, sid)
    assert (row.dept_review, row.dept_query) == ("Query", "Upload the NOC")


def test_bulk_update(engine, scholar_id):
    ids = [scholar_id("APP001"), scholar_id("APP004")]
    assert bulk_update_dept_review(engine, ids, "Rejected", HOD) == (True, "Updated 2 scholar(s) to Rejected")
    assert {_row(engine, i).dept_review for i in ids} == {"Rejected"}
    entry = activity_history(engine, HOD)[0]
    assert entry["action"] == "dept_review_bulk_updated"
    assert entry["details"]["ids"] == ids


def test_bulk_decision_skips_open_queries(engine, scholar_id):
    ids = [scholar_id("APP001"), scholar_id("APP010")]
    ok, msg = bulk_update_dept_review(engine, ids, "Approved", HOD)
    assert (ok, msg) == (True, "Updated 1 scholar(s) to Approved; 1 skipped with an open query")
    assert [_row(engine, i).dept_review for i in ids] == ["Approved", "Query"]

    # non-final statuses are not gated
    assert bulk_update_dept_review(engine, ids, "Pending")[1] == "Updated 2 scholar(s) to Pending"


def test_bulk_update_validation(engine):
    assert bulk_update_dept_review(engine, [], "Approved") == (False, "No scholars selected")
    assert bulk_update_dept_review(engine, [1], "Done") == (False, "Invalid review status: Done")


def test_open_query_blocks_final_decisions(engine, scholar_id):
    sid = scholar_id("APP010")
    assert _row(engine, sid).dept_query == "Please upload the employer NOC for part-time study."
    assert approve_scholar(engine, sid, HOD) == (False, OPEN_QUERY_BLOCKED)
    assert reject_scholar(engine, sid, "No NOC", HOD) == (False, OPEN_QUERY_BLOCKED)
    assert update_dept_review(engine, sid, "Approved", HOD) == (False, OPEN_QUERY_BLOCKED)
    assert _row(engine, sid).dept_review == "Query"


def test_resolved_query_can_be_approved(engine, scholar_id):
    sid = scholar_id("APP010")
    assert resolve_query(engine, sid, HOD) == (True, "Query marked as resolved")
    row = _row(engine, sid)
    assert (row.dept_review, row.query_resolved_dept) == ("Query Resolved", "resolved_to_CSE")
    assert activity_history(engine, HOD)[0]["action"] == "query_resolved"

    assert approve_scholar(engine, sid, HOD) == (True, "Review status set to Approved")
    row = _row(engine, sid)
    # the question is cleared; the resolution stays as history
    assert (row.dept_review, row.dept_query, row.query_resolved_dept) == ("Approved", None, "resolved_to_CSE")


def test_resolve_query_needs_an_open_query(engine, scholar_id):
    assert resolve_query(engine, scholar_id("APP001"), HOD) == (False, "No open query for this scholar")
    assert resolve_query(engine, 424242, HOD) == (False, "Scholar not found")
    assert resolve_query(engine, None, HOD) == (False, "Scholar ID is required")

    sid = scholar_id("APP010")
    resolve_query(engine, sid, HOD)
    assert resolve_query(engine, sid, HOD) == (False, "No open query for this scholar")


def test_new_query_resets_resolution(engine, scholar_id):
    sid = scholar_id("APP010")
    resolve_query(engine, sid, HOD)
    assert query_scholar(engine, sid, "Also send the fee receipt", HOD)[0]
    row = _row(engine, sid)
    assert (row.dept_review, row.dept_query, row.query_resolved_dept) == ("Query", "Also send the fee receipt", None)
    assert approve_scholar(engine, sid, HOD) == (False, OPEN_QUERY_BLOCKED)
