"""Structured-store backends for faculty, placement, FAQ, college, and curriculum data.

Architectural role:
    Wraps the relational store (Supabase/PostgREST) and the equivalent local JSON
    snapshot behind one query surface (`CollegeStore`). `StructuredLookup` only
    talks to this protocol, so tests substitute an in-memory fake.

Query model:
    Filtered selects only: equality, case-insensitive partial match (`ilike`),
    ordering, and limit. Records are read-only; nothing here writes.

Failure handling model:
    Every backend failure (PostgREST API errors, transport errors, unreadable
    snapshot files, malformed rows) is raised as `StoreError`. Whether that error
    is soft or hard is decided by the lookup layer, not here.

Determinism:
    Deterministic for fixed store contents. No caching: the local snapshot is
    re-read on every call, and each request builds its own client.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from dotenv import load_dotenv
from postgrest.exceptions import APIError
from supabase import Client, create_client

from collegegpt.core.errors import ConfigurationError, StoreError
from collegegpt.retrieval.records import (
    CollegeRecord,
    CurriculumRecord,
    FacultyRecord,
    FaqRecord,
    PlacementRecord,
    safe_number,
)

load_dotenv()

logger = logging.getLogger(__name__)


FACULTY_COLUMNS = "id,name,department,designation,email,phone,notes"
PLACEMENT_COLUMNS = "year,company_name,offers,salary_lpa"
FAQ_COLUMNS = "question,answer"
CURRICULUM_COLUMNS = "branch,semester,subject"


# =========================================================
# SETTINGS
# =========================================================

@dataclass(frozen=True)
class StoreSettings:
    """Runtime configuration for store backends.

    Relevant environment variables:
        - `STORE_BACKEND` (`supabase` | `local`)
        - `SUPABASE_URL`, `SUPABASE_KEY` / `SUPABASE_SERVICE_ROLE_KEY` / `SUPABASE_ANON_KEY`
        - `LOCAL_DATA_PATH`
        - `FACULTY_TABLE`, `PLACEMENTS_TABLE`, `FAQ_TABLE`, `COLLEGE_TABLE`, `CURRICULUM_TABLE`
        - `DEFAULT_PLACEMENT_YEAR`
    """

    backend: str = "local"
    supabase_url: str | None = None
    supabase_key: str | None = None
    local_data_path: str = os.path.join("data", "college_local.json")
    faculty_table: str = "faculty_list"
    placements_table: str = "college_placements"
    faq_table: str = "college_faq"
    college_table: str = "college_info"
    curriculum_table: str = "curriculum"
    default_placement_year: str = "2024-25"


def load_store_settings() -> StoreSettings:
    """Read `StoreSettings` from the current process environment."""
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = (
        os.getenv("SUPABASE_KEY")
        or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or os.getenv("SUPABASE_ANON_KEY")
    )
    default_backend = "supabase" if supabase_url else "local"

    return StoreSettings(
        backend=os.getenv("STORE_BACKEND", default_backend).strip().lower(),
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        local_data_path=os.getenv("LOCAL_DATA_PATH", StoreSettings.local_data_path),
        faculty_table=os.getenv("FACULTY_TABLE", StoreSettings.faculty_table),
        placements_table=os.getenv("PLACEMENTS_TABLE", StoreSettings.placements_table),
        faq_table=os.getenv("FAQ_TABLE", StoreSettings.faq_table),
        college_table=os.getenv("COLLEGE_TABLE", StoreSettings.college_table),
        curriculum_table=os.getenv("CURRICULUM_TABLE", StoreSettings.curriculum_table),
        default_placement_year=os.getenv(
            "DEFAULT_PLACEMENT_YEAR", StoreSettings.default_placement_year
        ),
    )


# =========================================================
# PROTOCOL
# =========================================================

class CollegeStore(Protocol):
    """Query surface required by `StructuredLookup`."""

    def faculty(
        self, department: str | None, name: str | None, order_by_name: bool = False
    ) -> list[FacultyRecord]:
        ...

    def latest_placement_year(self) -> str | None:
        ...

    def placements(
        self, year: str, company: str | None = None, highest_only: bool = False
    ) -> list[PlacementRecord]:
        ...

    def faqs(self) -> list[FaqRecord]:
        ...

    def college_info(self) -> CollegeRecord | None:
        ...

    def curriculum(
        self, branch: str | None = None, semester: int | None = None
    ) -> list[CurriculumRecord]:
        ...

    def probe(self) -> dict[str, Any]:
        ...


# =========================================================
# SUPABASE BACKEND
# =========================================================

class SupabaseStore:
    """PostgREST-backed store using the official Supabase client."""

    def __init__(self, client: Client, settings: StoreSettings) -> None:
        self.client = client
        self.settings = settings

    def _execute(self, query: Any, table: str) -> list[dict]:
        """Run a built query and return its rows.

        Raises:
            StoreError: API error, transport error, or non-list payload.
        """
        try:
            response = query.execute()
        except APIError as err:
            raise StoreError(f"{table}: {err.message or err}") from err
        except httpx.HTTPError as err:
            raise StoreError(f"{table}: store unreachable ({err})") from err

        data = getattr(response, "data", None)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(f"{table}: malformed response payload")
        return data

    def faculty(self, department=None, name=None, order_by_name=False):
        table = self.settings.faculty_table
        query = self.client.table(table).select(FACULTY_COLUMNS)
        if department:
            query = query.ilike("department", f"%{department}%")
        if name:
            query = query.ilike("name", f"%{name}%")
        if order_by_name:
            query = query.order("name")
        return [FacultyRecord.from_row(row) for row in self._execute(query, table)]

    def latest_placement_year(self):
        table = self.settings.placements_table
        query = self.client.table(table).select("year").order("year", desc=True).limit(1)
        rows = self._execute(query, table)
        if not rows:
            return None
        return rows[0].get("year") or None

    def placements(self, year, company=None, highest_only=False):
        table = self.settings.placements_table
        query = self.client.table(table).select(PLACEMENT_COLUMNS).eq("year", year)
        if company:
            query = query.ilike("company_name", f"%{company}%")
        if highest_only:
            query = query.order("salary_lpa", desc=True).limit(1)
        return [PlacementRecord.from_row(row) for row in self._execute(query, table)]

    def faqs(self):
        table = self.settings.faq_table
        query = self.client.table(table).select(FAQ_COLUMNS)
        return [FaqRecord.from_row(row) for row in self._execute(query, table)]

    def college_info(self):
        table = self.settings.college_table
        rows = self._execute(self.client.table(table).select("*").limit(1), table)
        return CollegeRecord.from_row(rows[0]) if rows else None

    def curriculum(self, branch=None, semester=None):
        table = self.settings.curriculum_table
        query = self.client.table(table).select(CURRICULUM_COLUMNS)
        if branch:
            query = query.ilike("branch", f"%{branch}%")
        if semester is not None:
            query = query.eq("semester", semester)
        query = query.order("semester")
        return [CurriculumRecord.from_row(row) for row in self._execute(query, table)]

    def probe(self):
        table = self.settings.placements_table
        rows = self._execute(self.client.table(table).select("*").limit(1), table)
        return {"rowsFetched": len(rows), "sampleRow": rows[0] if rows else None}


# =========================================================
# LOCAL JSON SNAPSHOT BACKEND
# =========================================================

def _contains(haystack: Any, needle: str) -> bool:
    """Case-insensitive partial match, mirroring SQL `ilike '%needle%'`."""
    return needle.lower() in str(haystack or "").lower()


class LocalJsonStore:
    """File-backed store reading a JSON snapshot on every call.

    Snapshot layout:
        `college` (object), `faculty`, `placements`, `faq` (arrays), and
        `curriculum` (branch -> "Semester N" -> list of subjects).
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _load(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as err:
            raise StoreError(f"Local data not found or unreadable: {self.path} ({err})") from err

        if not isinstance(data, dict):
            raise StoreError(f"Local data malformed: {self.path}")
        return data

    def _section(self, key: str, kind: type) -> Any:
        value = self._load().get(key)
        if value is None:
            return kind()
        if not isinstance(value, kind):
            raise StoreError(f"Local data malformed: '{key}' must be {kind.__name__}")
        return value

    def faculty(self, department=None, name=None, order_by_name=False):
        records = [FacultyRecord.from_row(row) for row in self._section("faculty", list)]
        if department:
            records = [r for r in records if _contains(r.department, department)]
        if name:
            records = [r for r in records if _contains(r.name, name)]
        if order_by_name:
            records.sort(key=lambda r: r.name)
        return records

    def latest_placement_year(self):
        years = [
            str(row.get("year"))
            for row in self._section("placements", list)
            if isinstance(row, dict) and row.get("year")
        ]
        return max(years) if years else None

    def placements(self, year, company=None, highest_only=False):
        records = [PlacementRecord.from_row(row) for row in self._section("placements", list)]
        records = [r for r in records if r.year == year]
        if company:
            records = [r for r in records if _contains(r.company_name, company)]
        if highest_only:
            records = sorted(records, key=lambda r: safe_number(r.salary_lpa), reverse=True)[:1]
        return records

    def faqs(self):
        return [FaqRecord.from_row(row) for row in self._section("faq", list)]

    def college_info(self):
        college = self._section("college", dict)
        return CollegeRecord.from_row(college) if college else None

    def curriculum(self, branch=None, semester=None):
        records: list[CurriculumRecord] = []
        for branch_name, semesters in self._section("curriculum", dict).items():
            if branch and not (
                _contains(branch_name, branch) or _contains(branch, branch_name)
            ):
                continue
            if not isinstance(semesters, dict):
                raise StoreError(f"Local data malformed: curriculum '{branch_name}'")
            for semester_key, subjects in semesters.items():
                number = semester_key.rsplit(" ", 1)[-1]
                if not number.isdigit():
                    raise StoreError(f"Local data malformed: semester key {semester_key!r}")
                if semester is not None and int(number) != semester:
                    continue
                records.extend(
                    CurriculumRecord(branch=branch_name, semester=int(number), subject=str(s))
                    for s in subjects or []
                )
        records.sort(key=lambda r: r.semester)
        return records

    def probe(self):
        rows = self._section("placements", list)[:1]
        return {"rowsFetched": len(rows), "sampleRow": rows[0] if rows else None}


# =========================================================
# FACTORY
# =========================================================

def build_store(settings: StoreSettings | None = None) -> CollegeStore:
    """Construct the configured backend.

    Raises:
        ConfigurationError: Unknown backend, or Supabase selected without
            URL/key, or client construction rejected the credentials.
    """
    settings = settings or load_store_settings()

    if settings.backend == "local":
        return LocalJsonStore(settings.local_data_path)

    if settings.backend != "supabase":
        raise ConfigurationError(f"Unsupported STORE_BACKEND: {settings.backend}")

    if not settings.supabase_url or not settings.supabase_key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set for the supabase backend.")

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as err:
        raise ConfigurationError(f"Supabase client could not be created: {err}") from err

    return SupabaseStore(client, settings)
