# core/department_mapping.py
"""
Program -> department -> faculty lookups used when forwarding applications.

The same program name can belong to different departments in different
faculties (e.g. "Biotechnology" under Engineering vs. Science), so the
faculty is consulted before the plain lookup tables.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

ENGINEERING = "Faculty of Engineering & Technology"
MANAGEMENT = "Faculty of Management"
SCIENCE = "Faculty of Science & Humanities"
MEDICAL = "Faculty of Medical & Health Science"

FACULTIES = (ENGINEERING, SCIENCE, MANAGEMENT, MEDICAL)

PROGRAM_TO_DEPARTMENT: Dict[str, str] = {
    # Engineering & Technology
    "biomedical engineering": "BME",
    "biomedical": "BME",
    "civil engineering": "CIVIL",
    "civil": "CIVIL",
    "computer science and engineering": "CSE",
    "computer science engineering": "CSE",
    "cse": "CSE",
    "electrical and electronics engineering": "EEE",
    "electrical engineering": "EEE",
    "electrical": "EEE",
    "eee": "EEE",
    "electronics and communication engineering": "ECE",
    "electronics and communication": "ECE",
    "electronics": "ECE",
    "ece": "ECE",
    "mechanical engineering": "MECH",
    "mechanical": "MECH",
    "english": "ENGENG",
    # Management
    "management studies": "MBA",
    "business administration": "MBA",
    "mba": "MBA",
    "management": "MBA",
    "physical education": "PED",
    "physical edu": "PED",
    "sports": "PED",
    # Science & Humanities
    "commerce": "COMM",
    "english & foreign languages": "EFL",
    "english and foreign languages": "EFL",
    "foreign languages": "EFL",
    "fashion designing": "FASHION",
    "fashion design": "FASHION",
    "tamil": "TAMIL",
    "visual communication": "VISCOM",
    "visual communications": "VISCOM",
    # Medical & Health Science
    "occupational therapy": "OT",
    "medical imaging technology": "MIT",
    "medical imaging": "MIT",
    "clinical psychology": "CP",
    "psychology": "CP",
    "renal dialysis technology": "RDT",
    "renal dialysis": "RDT",
    "anaesthesia technology": "AT",
    "anaesthesia": "AT",
    "anesthesia": "AT",
    # Without faculty context these fall back to the engineering departments
    "biotechnology": "ENGBIO",
    "biotech": "ENGBIO",
    "chemistry": "ENGCHEM",
    "computer science": "CSE",
    "mathematics": "ENGMATH",
    "maths": "ENGMATH",
    "physics": "ENGPHYS",
    "biochemistry": "BIOCHEM_SCI",
    "microbiology": "MICRO_SCI",
}

DEPARTMENT_TO_FACULTY: Dict[str, str] = {
    **{code: ENGINEERING for code in (
        "BME", "ENGBIO", "ENGCHEM", "CIVIL", "CSE", "EEE", "ECE",
        "ENGENG", "ENGMATH", "MECH", "ENGPHYS",
    )},
    **{code: MANAGEMENT for code in ("MBA", "PED")},
    **{code: SCIENCE for code in (
        "COMM", "CS_SCI", "BIO_SCI", "BIOCHEM_SCI", "MICRO_SCI", "MATH_SCI",
        "PHYS_SCI", "CHEM_SCI", "EFL", "FASHION", "TAMIL", "VISCOM",
    )},
    **{code: MEDICAL for code in ("BIOCHEM_MED", "MICRO_MED", "OT", "MIT", "CP", "RDT", "AT")},
}

# keyword -> {faculty keyword: department}
_CONTEXT_RULES = (
    (("biotechnology", "biotech"), {"engineering": "ENGBIO", "science": "BIO_SCI"}),
    (("biochemistry",), {"medical": "BIOCHEM_MED", "science": "BIOCHEM_SCI"}),
    (("microbiology",), {"medical": "MICRO_MED", "science": "MICRO_SCI"}),
    (("computer science",), {"engineering": "CSE", "science": "CS_SCI"}),
    (("mathematics", "maths"), {"engineering": "ENGMATH", "science": "MATH_SCI"}),
    (("physics",), {"engineering": "ENGPHYS", "science": "PHYS_SCI"}),
    (("chemistry",), {"engineering": "ENGCHEM", "science": "CHEM_SCI"}),
)

FACULTY_FORWARD_STATUS: Dict[str, str] = {
    ENGINEERING: "Forwarded to Engineering",
    SCIENCE: "Forwarded to Science",
    MANAGEMENT: "Forwarded to Management",
    MEDICAL: "Forwarded to Medical",
}

FACULTY_BACK_STATUS: Dict[str, str] = {
    ENGINEERING: "Back_To_Engineering",
    SCIENCE: "Back_To_Science",
    MANAGEMENT: "Back_To_Management",
    MEDICAL: "Back_To_Medical",
}

DEPARTMENT_SHORT_CODES: Dict[str, str] = {
    "Computer Science Engineering": "CSE",
    "Computer Science and Engineering": "CSE",
    "Electronics and Communication Engineering": "ECE",
    "Electrical and Electronics Engineering": "EEE",
    "Mechanical Engineering": "MECH",
    "Civil Engineering": "CIVIL",
    "Biotechnology": "BIO",
    "Chemistry": "CHEM",
    "Physics": "PHYSICS",
    "Mathematics": "MATH",
    "Management": "MBA",
    "Business Administration": "MBA",
}

FORWARDED_PREFIX = "FORWARDED_TO_"


def _normalise_program(program: str) -> str:
    text = program.lower()
    text = re.sub(r"^ph\.d\.?\s*-?\s*", "", text)
    if "(" in text:
        text = text.split("(")[0]
    return text.strip()


def department_from_program(program: Optional[str], faculty: Optional[str] = None) -> Optional[str]:
    if not program or not isinstance(program, str):
        return None
    normalised = _normalise_program(program)

    if faculty:
        fac = faculty.lower()
        for keywords, by_faculty in _CONTEXT_RULES:
            if any(k in normalised for k in keywords):
                for fac_key, dept in by_faculty.items():
                    if fac_key in fac:
                        return dept

    if normalised in PROGRAM_TO_DEPARTMENT:
        return PROGRAM_TO_DEPARTMENT[normalised]
    for key, dept in PROGRAM_TO_DEPARTMENT.items():
        if key in normalised:
            return dept
    return None


def faculty_from_department(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return DEPARTMENT_TO_FACULTY.get(code)


def forwarding_status(code: Optional[str]) -> Optional[str]:
    return FACULTY_FORWARD_STATUS.get(faculty_from_department(code) or "")


def faculty_status_for(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return f"{FORWARDED_PREFIX}{code}"


def status_for_faculty(faculty: Optional[str]) -> Optional[str]:
    return FACULTY_FORWARD_STATUS.get(faculty or "")


def validate_for_forwarding(scholar: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Returns {"can_forward", "error", "department"} for a scholar row."""
    if not scholar:
        return {"can_forward": False, "error": "Scholar data not found", "department": None}
    if str(scholar.get("faculty_status") or "").startswith(FORWARDED_PREFIX):
        return {"can_forward": False, "error": "Already forwarded", "department": None}
    program = scholar.get("program")
    if not program:
        return {"can_forward": False, "error": "Scholar program information is missing", "department": None}

    department = department_from_program(program, scholar.get("faculty"))
    if not department:
        return {
            "can_forward": False,
            "error": f'Cannot determine department from program: "{program}" '
                     f'in faculty: "{scholar.get("faculty") or "Unknown"}"',
            "department": None,
        }
    return {"can_forward": True, "error": None, "department": department}


def needs_status_sync(scholar: Optional[Mapping[str, Any]]) -> bool:
    if not scholar:
        return False
    return (
        str(scholar.get("faculty_status") or "").startswith(FORWARDED_PREFIX)
        and not str(scholar.get("status") or "").startswith("Forwarded to")
    )


def department_short_code(name: Optional[str]) -> str:
    if not name:
        return "UNKNOWN"
    if name in DEPARTMENT_SHORT_CODES:
        return DEPARTMENT_SHORT_CODES[name]
    lowered = name.lower()
    for full, code in DEPARTMENT_SHORT_CODES.items():
        if lowered in full.lower() or full.lower() in lowered:
            return code
    letters = re.sub(r"[^A-Z]", "", name.upper())[:4]
    return letters or "UNKNOWN"
