from core.dashboard_stats import BREAKDOWN_COLUMNS, department_statistics, is_full_time, is_part_time, summarise
from core.records import ScholarRecord, as_records


def rows():
    return as_records([
        {"id": 1, "department": "CSE", "type": "Full Time", "faculty_status": "FORWARDED_TO_CSE", "dept_review": "Pending"},
        {"id": 2, "department": "CSE", "type": "Part Time External", "faculty_status": None, "dept_review": "Approved"},
        {"id": 3, "department": "ECE", "type": "full time", "faculty_status": "FORWARDED_TO_ECE", "dept_review": "Query"},
        {"id": 4, "department": None, "type": None, "dept_review": None},
        {"id": 5, "department": "ECE", "type": "Part Time Internal", "dept_review": "Rejected"},
    ], ScholarRecord)


def test_mode_detection():
    assert is_full_time("Full Time")
    assert is_part_time("Part Time Internal")
    assert not is_full_time(None)
    assert not is_part_time("")


def test_summarise_headline_counts():
    stats = summarise(rows())
    assert (stats["total"], stats["full_time"], stats["part_time"]) == (5, 2, 2)
    assert (stats["forwarded"], stats["pending"]) == (2, 3)


def test_summarise_breakdown_sorted_by_department():
    frame = summarise(rows())["by_department"]
    assert list(frame.columns) == BREAKDOWN_COLUMNS
    assert list(frame["Department"]) == ["CSE", "ECE", "Unassigned"]
    cse = frame.set_index("Department").loc["CSE"]
    assert (cse["Full Time"], cse["Part Time"], cse["Forwarded"], cse["Pending"], cse["Total"]) == (1, 1, 1, 1, 2)


def test_summarise_empty():
    stats = summarise([])
    assert stats["total"] == stats["forwarded"] == stats["pending"] == 0
    assert stats["by_department"].empty
    assert list(stats["by_department"].columns) == BREAKDOWN_COLUMNS


def test_department_statistics():
    assert department_statistics(rows()) == {
        "total": 5, "pending": 2, "approved": 1, "rejected": 1, "query": 1, "query_resolved": 0,
    }
    assert department_statistics([]) == {
        "total": 0, "pending": 0, "approved": 0, "rejected": 0, "query": 0, "query_resolved": 0,
    }


def test_resolved_queries_have_their_own_bucket():
    stats = department_statistics(as_records([
        {"id": 1, "dept_review": "Query Resolved"},
        {"id": 2, "dept_review": "Query"},
        {"id": 3, "dept_review": "Query Resolved"},
    ], ScholarRecord))
    assert (stats["total"], stats["query"], stats["query_resolved"]) == (3, 1, 2)
    assert stats["total"] == sum(v for k, v in stats.items() if k != "total")
