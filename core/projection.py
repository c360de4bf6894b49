# core/projection.py
"""
Client-side projection for the workflow tables.

    records -> scope filter -> search -> categorical filters -> sort

Every stage returns a new list; the input sequence is never touched. The whole
chain is deterministic, and running it on its own output gives the same rows
in the same order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.records import Record

if TYPE_CHECKING:
    from core.view_state import ViewState

ASC = "asc"
DESC = "desc"
ALL = "All"


@dataclass(frozen=True)
class FilterDimension:
    """One categorical filter: which record field it reads and its "All" sentinel."""

    name: str
    field: str
    label: str
    all_value: str = ALL
    options: Tuple[str, ...] = ()  # fixed choices; empty -> derived from the data


@dataclass(frozen=True)
class PipelineConfig:
    search_fields: Tuple[str, ...]
    ownership_fields: Tuple[str, ...]
    dimensions: Tuple[FilterDimension, ...] = ()
    default_sort_field: str = "application_no"
    sort_fields: Tuple[str, ...] = field(default=())

    def dimension(self, name: str) -> FilterDimension:
        for dim in self.dimensions:
            if dim.name == name:
                return dim
        raise ValueError(f"Unknown filter dimension: {name!r}")

    def sentinels(self) -> Dict[str, str]:
        return {dim.name: dim.all_value for dim in self.dimensions}


# ============================================================================
# STAGES
# ============================================================================

def owned_by(record: Record, actor_scope: str, ownership_fields: Sequence[str]) -> bool:
    """True when any ownership field (routing column or legacy column) equals the scope."""
    return any(record.text(name) == actor_scope for name in ownership_fields)


def scope_filter(records: Iterable[Record], actor_scope: Optional[str], ownership_fields: Sequence[str]) -> List[Record]:
    # No scope means nothing is visible.
    if not actor_scope:
        return []
    return [r for r in records if owned_by(r, actor_scope, ownership_fields)]


def matches_search(record: Record, term: Optional[str], search_fields: Sequence[str]) -> bool:
    if not term:
        return True
    needle = term.lower()
    return any(needle in record.text(name).lower() for name in search_fields)


def matches_filters(record: Record, selections: Mapping[str, str], dimensions: Sequence[FilterDimension]) -> bool:
    for dim in dimensions:
        selected = selections.get(dim.name, dim.all_value)
        if selected == dim.all_value:
            continue
        # exact, case-sensitive: values must match the stored casing
        if record.text(dim.field) != selected:
            return False
    return True


def _sort_text(record: Record, field_name: str) -> str:
    return record.text(field_name).lower()


def compare(a: Record, b: Record, field_name: str, direction: str = ASC) -> int:
    """Case-insensitive string comparison; numbers compare lexically ("10" < "9")."""
    av, bv = _sort_text(a, field_name), _sort_text(b, field_name)
    result = (av > bv) - (av < bv)
    return -result if direction == DESC else result


def sort_records(records: Iterable[Record], field_name: str, direction: str = ASC) -> List[Record]:
    if direction not in (ASC, DESC):
        raise ValueError(f"Sort direction must be '{ASC}' or '{DESC}', got {direction!r}")
    # sorted() is stable, so equal keys keep insertion order in both directions
    return sorted(records, key=cmp_to_key(lambda a, b: compare(a, b, field_name, direction)))


def unique_values(records: Iterable[Record], field_name: str, sentinel: str = ALL) -> List[str]:
    seen: List[str] = [sentinel]
    for record in records:
        value = record.text(field_name)
        if value and value not in seen:
            seen.append(value)
    return seen


# ============================================================================
# PIPELINE
# ============================================================================

class ProjectionPipeline:
    """One configured pipeline per workflow screen."""

    def __init__(self, config: PipelineConfig):
        self.config = config

    def scoped(self, records: Iterable[Record], scope: Optional[str]) -> List[Record]:
        return scope_filter(records, scope, self.config.ownership_fields)

    def project(self, records: Optional[Iterable[Record]], scope: Optional[str], state: "ViewState") -> Optional[List[Record]]:
        """Visible rows for the given view state, or None while records are still loading."""
        if records is None:
            return None
        cfg = self.config
        rows = [
            r for r in self.scoped(records, scope)
            if matches_search(r, state.search_term, cfg.search_fields)
            and matches_filters(r, state.selected_filters, cfg.dimensions)
        ]
        return sort_records(rows, state.sort_field, state.sort_direction)

    def filter_options(self, records: Optional[Iterable[Record]], scope: Optional[str]) -> Dict[str, List[str]]:
        """Choices for every dimension, taken from the scoped rows (not the filtered ones)."""
        scoped = self.scoped(records or [], scope)
        options: Dict[str, List[str]] = {}
        for dim in self.config.dimensions:
            if dim.options:
                options[dim.name] = [dim.all_value, *dim.options]
            else:
                options[dim.name] = unique_values(scoped, dim.field, dim.all_value)
        return options


# ============================================================================
# SCREEN CONFIGURATIONS
# ============================================================================

SCHOLAR_REVIEW_STATUSES = ("Pending", "Query", "Query Resolved", "Approved", "Rejected")
QUERY_STATUSES = ("Query", "Query Resolved")
EXAM_STATUSES = ("Pending", "Scheduled", "Completed", "Cancelled")

SCHOLAR_WORKFLOW = PipelineConfig(
    search_fields=("registered_name", "application_no", "department"),
    ownership_fields=("faculty_forward", "faculty"),
    dimensions=(
        FilterDimension("department", "department", "Department", all_value="All Departments"),
        FilterDimension("status", "dept_review", "Department Status", options=SCHOLAR_REVIEW_STATUSES),
    ),
    default_sort_field="application_no",
    sort_fields=("application_no", "registered_name", "department", "dept_review", "created_at"),
)

EXAMINATION_WORKFLOW = PipelineConfig(
    search_fields=("scholar_name", "application_no", "department"),
    ownership_fields=("faculty", "assigned_faculty"),
    dimensions=(
        FilterDimension("department", "department", "Department", all_value="All Departments"),
        FilterDimension("status", "exam_status", "Exam Status", options=EXAM_STATUSES),
    ),
    default_sort_field="application_no",
    sort_fields=("application_no", "scholar_name", "department", "exam_status", "total_marks"),
)

DEPARTMENT_APPLICATIONS = PipelineConfig(
    search_fields=("registered_name", "application_no", "email"),
    ownership_fields=("department", "assigned_department"),
    dimensions=(
        FilterDimension("type", "type", "Mode of Study"),
        FilterDimension("status", "dept_review", "Review Status", options=SCHOLAR_REVIEW_STATUSES),
    ),
    default_sort_field="application_no",
    sort_fields=("application_no", "registered_name", "type", "dept_review", "created_at"),
)

DEPARTMENT_QUERIES = PipelineConfig(
    search_fields=("registered_name", "application_no", "dept_query"),
    ownership_fields=("department", "assigned_department"),
    dimensions=(
        FilterDimension("type", "type", "Mode of Study"),
        FilterDimension("status", "dept_review", "Query Status", options=QUERY_STATUSES),
    ),
    default_sort_field="application_no",
    sort_fields=("application_no", "registered_name", "query_timestamp", "dept_review"),
)
