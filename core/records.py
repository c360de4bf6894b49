# core/records.py
"""
Read-only record snapshots for the workflow tables.

Rows come back from the database as loosely shaped mappings (legacy and new
columns side by side). Every read goes through Record.text(), which turns a
missing or NULL column into "" so filtering and sorting never trip on it.
"""
from __future__ import annotations

from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Optional


class Record(Mapping[str, Any]):
    """Immutable view over one backend row."""

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **fields: Any):
        merged = dict(data or {})
        merged.update(fields)
        self._data = MappingProxyType(merged)

    # Mapping protocol
    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return dict(self._data) == dict(other._data)
        if isinstance(other, Mapping):
            return dict(self._data) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._data)!r})"

    @property
    def key(self) -> Any:
        return self._data.get("id")

    def text(self, field: str) -> str:
        """Field value as a string; missing/None/empty becomes ""."""
        value = self._data.get(field)
        if value is None:
            return ""
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)

    def with_updates(self, **changes: Any) -> "Record":
        """Copy with some fields replaced (used after a backend write echoes the row back)."""
        data = dict(self._data)
        data.update(changes)
        return type(self)(data)

    def to_dict(self) -> dict:
        return dict(self._data)


class ScholarRecord(Record):
    """Row of scholar_applications."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return self.text("registered_name")

    @property
    def application_no(self) -> str:
        return self.text("application_no")

    @property
    def is_forwarded(self) -> bool:
        return self.text("faculty_status").startswith("FORWARDED_TO_")

    @property
    def query_resolved(self) -> bool:
        # query_resolved_dept holds e.g. "resolved_to_CSE" once the scholar answers
        return bool(self.text("query_resolved_dept").strip()) or self.text("dept_review") == "Query Resolved"

    @property
    def has_open_query(self) -> bool:
        """Raised by the department and not yet resolved; blocks approve/reject."""
        return self.text("dept_review") == "Query" and not self.query_resolved

    @property
    def in_query_flow(self) -> bool:
        return self.text("dept_review") in ("Query", "Query Resolved")


class ExaminationRecord(Record):
    """Row of examination_records."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return self.text("scholar_name")

    @property
    def application_no(self) -> str:
        return self.text("application_no")


def as_records(rows: Optional[Iterable[Mapping[str, Any]]], kind: type = Record) -> Optional[List[Record]]:
    """Wrap raw rows; None (still loading) passes through as None."""
    if rows is None:
        return None
    out: List[Record] = []
    for row in rows:
        if isinstance(row, kind):
            out.append(row)
        elif hasattr(row, "_mapping"):
            out.append(kind(dict(row._mapping)))
        else:
            out.append(kind(row))
    return out
