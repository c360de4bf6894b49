# core/dashboard_stats.py
from __future__ import annotations
from typing import Any, Dict, Iterable
import pandas as pd

from core.records import Record

BREAKDOWN_COLUMNS = ["Department", "Full Time", "Part Time", "Forwarded", "Pending", "Total"]

def is_full_time(mode: str) -> bool:
    return "full" in (mode or "").lower()

def is_part_time(mode: str) -> bool:
    return "part" in (mode or "").lower()

def is_forwarded(record: Record) -> bool:
    return record.text("faculty_status").startswith("FORWARDED_TO_")

def summarise(records: Iterable[Record]) -> Dict[str, Any]:
    """Headline counts plus a per-department DataFrame for the faculty dashboard."""
    rows = list(records)
    frame = pd.DataFrame({
        "Department": [r.text("department") or "Unassigned" for r in rows],
        "Full Time": [is_full_time(r.text("type")) for r in rows],
        "Part Time": [is_part_time(r.text("type")) for r in rows],
        "Forwarded": [is_forwarded(r) for r in rows],
    })

    if frame.empty:
        breakdown = pd.DataFrame(columns=BREAKDOWN_COLUMNS)
    else:
        frame["Pending"] = ~frame["Forwarded"]
        breakdown = (
            frame.groupby("Department", sort=True)
            .agg({"Full Time": "sum", "Part Time": "sum", "Forwarded": "sum", "Pending": "sum"})
            .astype(int)
            .reset_index()
        )
        breakdown["Total"] = breakdown[["Forwarded", "Pending"]].sum(axis=1)
        breakdown = breakdown[BREAKDOWN_COLUMNS]

    forwarded = int(frame["Forwarded"].sum()) if not frame.empty else 0
    return {
        "total": len(rows),
        "full_time": int(frame["Full Time"].sum()) if not frame.empty else 0,
        "part_time": int(frame["Part Time"].sum()) if not frame.empty else 0,
        "forwarded": forwarded,
        "pending": len(rows) - forwarded,
        "by_department": breakdown,
    }

def department_statistics(records: Iterable[Record]) -> Dict[str, int]:
    """Counts by dept_review for the HOD portal header."""
    counts = {"total": 0, "pending": 0, "approved": 0, "rejected": 0, "query": 0, "query_resolved": 0}
    for r in records:
        counts["total"] += 1
        key = (r.text("dept_review") or "Pending").lower().replace(" ", "_")
        if key in counts:
            counts[key] += 1
    return counts
