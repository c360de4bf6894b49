import pytest

from core.department_mapping import (
    ENGINEERING, MANAGEMENT, SCIENCE,
    department_from_program, department_short_code, faculty_from_department,
    faculty_status_for, forwarding_status, needs_status_sync, status_for_faculty,
    validate_for_forwarding,
)


@pytest.mark.parametrize("program, faculty, expected", [
    ("Ph.D. - Computer Science and Engineering (Full Time)", ENGINEERING, "CSE"),
    ("Ph.D. - Computer Science (Full Time)", SCIENCE, "CS_SCI"),
    ("Ph.D. - Computer Science", ENGINEERING, "CSE"),
    ("Ph.D. Mechanical Engineering", None, "MECH"),
    ("Ph.D. - Electronics and Communication Engineering", ENGINEERING, "ECE"),
    ("Ph.D. - Management Studies", MANAGEMENT, "MBA"),
    ("Ph.D. - Biotechnology", SCIENCE, "BIO_SCI"),
    ("Ph.D. - Biotechnology", None, "ENGBIO"),
    ("Ph.D. - Underwater Basket Weaving", ENGINEERING, None),
    ("", ENGINEERING, None),
    (None, None, None),
])
def test_department_from_program(program, faculty, expected):
    assert department_from_program(program, faculty) == expected


def test_faculty_and_status_lookups():
    assert faculty_from_department("CSE") == ENGINEERING
    assert faculty_from_department("MBA") == MANAGEMENT
    assert faculty_from_department(None) is None
    assert forwarding_status("ECE") == "Forwarded to Engineering"
    assert forwarding_status("NOPE") is None
    assert faculty_status_for("CSE") == "FORWARDED_TO_CSE"
    assert faculty_status_for("") is None
    assert status_for_faculty(MANAGEMENT) == "Forwarded to Management"


def test_validate_for_forwarding():
    ok = validate_for_forwarding({"program": "Ph.D. - Civil Engineering", "faculty": ENGINEERING})
    assert ok == {"can_forward": True, "error": None, "department": "CIVIL"}

    assert validate_for_forwarding(None)["error"] == "Scholar data not found"
    assert validate_for_forwarding({"faculty_status": "FORWARDED_TO_CSE", "program": "CSE"})["error"] == "Already forwarded"
    assert "missing" in validate_for_forwarding({"program": ""})["error"]

    unknown = validate_for_forwarding({"program": "Ph.D. - Astrology", "faculty": ENGINEERING})
    assert not unknown["can_forward"]
    assert "Astrology" in unknown["error"]


def test_needs_status_sync():
    assert needs_status_sync({"faculty_status": "FORWARDED_TO_CSE", "status": "Submitted"})
    assert not needs_status_sync({"faculty_status": "FORWARDED_TO_CSE", "status": "Forwarded to Engineering"})
    assert not needs_status_sync({"faculty_status": None})
    assert not needs_status_sync(None)


@pytest.mark.parametrize("name, code", [
    ("Computer Science and Engineering", "CSE"),
    ("Mechanical Engineering", "MECH"),
    ("Management Studies", "MBA"),
    ("mechanical", "MECH"),
    ("Xyz Lab", "XYZL"),
    ("", "UNKNOWN"),
    (None, "UNKNOWN"),
])
def test_department_short_code(name, code):
    assert department_short_code(name) == code


def test_seeded_department_names_agree_with_program_mapping():
    for name in ("Computer Science and Engineering", "Mechanical Engineering", "Civil Engineering"):
        assert department_short_code(name) == department_from_program(f"Ph.D. - {name}", ENGINEERING)
