"""Read-only record types returned by `collegegpt.retrieval.store` backends.

Schema contract:
    Field names match the authoritative table columns (`faculty_list`,
    `college_placements`, `college_faq`, `college_info`, `curriculum`) and the
    local JSON snapshot keys. There is exactly one accepted name per column.

Numeric fields:
    `offers` and `salary_lpa` keep the raw store value. Readers coerce them
    with `safe_number`, so malformed numbers degrade to zero instead of
    failing the whole row set.
"""

import re
from dataclasses import dataclass
from typing import Any

from collegegpt.core.errors import StoreError


def safe_number(value: Any) -> float:
    """Coerce a loosely formatted number ("12 LPA", "1,200") to float; 0 on failure."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = re.sub(r"[^\d.-]", "", str(value or ""))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def _require(row: Any, key: str, table: str) -> Any:
    if not isinstance(row, dict):
        raise StoreError(f"Malformed {table} row: expected object, got {type(row).__name__}")
    if key not in row:
        raise StoreError(f"Malformed {table} row: missing '{key}'")
    return row[key]


@dataclass(frozen=True)
class FacultyRecord:
    name: str
    department: str | None = None
    designation: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    id: Any = None

    @classmethod
    def from_row(cls, row: dict) -> "FacultyRecord":
        return cls(
            name=str(_require(row, "name", "faculty") or ""),
            department=row.get("department"),
            designation=row.get("designation"),
            email=row.get("email"),
            phone=row.get("phone"),
            notes=row.get("notes"),
            id=row.get("id"),
        )

    def get(self, field_name: str) -> Any:
        return getattr(self, field_name, None)


@dataclass(frozen=True)
class PlacementRecord:
    year: str
    company_name: str
    offers: Any = 0
    salary_lpa: Any = 0

    @classmethod
    def from_row(cls, row: dict) -> "PlacementRecord":
        return cls(
            year=str(row.get("year") or ""),
            company_name=str(_require(row, "company_name", "placements") or ""),
            offers=row.get("offers", 0),
            salary_lpa=row.get("salary_lpa", 0),
        )


@dataclass(frozen=True)
class FaqRecord:
    question: str
    answer: str

    @classmethod
    def from_row(cls, row: dict) -> "FaqRecord":
        return cls(
            question=str(_require(row, "question", "faq") or ""),
            answer=str(_require(row, "answer", "faq") or ""),
        )


@dataclass(frozen=True)
class CollegeRecord:
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    established: Any = None
    affiliation: str | None = None
    approved_by: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "CollegeRecord":
        if not isinstance(row, dict):
            raise StoreError("Malformed college row: expected object")
        return cls(
            name=row.get("name"),
            address=row.get("address"),
            phone=row.get("phone"),
            established=row.get("established"),
            affiliation=row.get("affiliation"),
            approved_by=row.get("approved_by"),
        )


@dataclass(frozen=True)
class CurriculumRecord:
    branch: str
    semester: int
    subject: str

    @classmethod
    def from_row(cls, row: dict) -> "CurriculumRecord":
        semester = _require(row, "semester", "curriculum")
        try:
            semester = int(semester)
        except (TypeError, ValueError):
            raise StoreError(f"Malformed curriculum row: bad semester {semester!r}")
        return cls(
            branch=str(_require(row, "branch", "curriculum") or ""),
            semester=semester,
            subject=str(_require(row, "subject", "curriculum") or ""),
        )
