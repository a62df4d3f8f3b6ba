import pytest
import requests

from collegegpt.core.errors import StoreError
from collegegpt.llm.provider_config import ProviderSettings
from collegegpt.retrieval.records import (
    CollegeRecord,
    CurriculumRecord,
    FacultyRecord,
    FaqRecord,
    PlacementRecord,
)


class FakeStore:
    """In-memory CollegeStore that records every call."""

    def __init__(
        self,
        faculty=None,
        placements=None,
        faqs=None,
        college=None,
        curriculum=None,
        error=None,
    ):
        self.faculty_rows = faculty or []
        self.placement_rows = placements or []
        self.faq_rows = faqs or []
        self.college = college
        self.curriculum_rows = curriculum or []
        self.error = error
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.error:
            raise StoreError(self.error)

    def faculty(self, department=None, name=None, order_by_name=False):
        self._record("faculty", department, name, order_by_name)
        rows = [
            r for r in self.faculty_rows
            if (not department or department.lower() in (r.department or "").lower())
            and (not name or name.lower() in r.name.lower())
        ]
        return sorted(rows, key=lambda r: r.name) if order_by_name else rows

    def latest_placement_year(self):
        self._record("latest_placement_year")
        years = [r.year for r in self.placement_rows]
        return max(years) if years else None

    def placements(self, year, company=None, highest_only=False):
        self._record("placements", year, company, highest_only)
        rows = [r for r in self.placement_rows if r.year == year]
        if company:
            rows = [r for r in rows if company.lower() in r.company_name.lower()]
        if highest_only:
            rows = sorted(rows, key=lambda r: float(r.salary_lpa), reverse=True)[:1]
        return rows

    def faqs(self):
        self._record("faqs")
        return list(self.faq_rows)

    def college_info(self):
        self._record("college_info")
        return self.college

    def curriculum(self, branch=None, semester=None):
        self._record("curriculum", branch, semester)
        return [
            r for r in self.curriculum_rows
            if (not branch or branch.lower() in r.branch.lower())
            and (semester is None or r.semester == semester)
        ]

    def probe(self):
        self._record("probe")
        rows = self.placement_rows[:1]
        return {"rowsFetched": len(rows), "sampleRow": None}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Scripted stand-in for `requests`; pops one response per call.

    A scripted entry may be an exception instance, which is raised instead.
    """

    def __init__(self, get=None, post=None):
        self.get_responses = list(get or [])
        self.post_responses = list(post or [])
        self.calls = []

    def _next(self, queue, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        if not queue:
            raise AssertionError(f"unexpected {method} {url}")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next(self.get_responses, "get", url, kwargs)

    def post(self, url, **kwargs):
        return self._next(self.post_responses, "post", url, kwargs)


def gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def openai_payload(text):
    return {"choices": [{"message": {"content": text}}]}


@pytest.fixture
def faculty_rows():
    return [
        FacultyRecord(name="Ramesh Kumar", department="CSE", email="ramesh@x.edu", phone="98000"),
        FacultyRecord(name="Anita Patil", department="CSE", email="anita@x.edu"),
        FacultyRecord(name="Suresh Hegde", department="ECE", phone="98003"),
    ]


@pytest.fixture
def placement_rows():
    return [
        PlacementRecord(year="2023-24", company_name="Infosys", offers=4, salary_lpa=3.6),
        PlacementRecord(year="2024-25", company_name="Acme", offers=5, salary_lpa=6.5),
        PlacementRecord(year="2024-25", company_name="Globex", offers=2, salary_lpa=9.0),
    ]


@pytest.fixture
def store(faculty_rows, placement_rows):
    return FakeStore(
        faculty=faculty_rows,
        placements=placement_rows,
        faqs=[
            FaqRecord(question="Is hostel facility available?", answer="Yes, on campus."),
            FaqRecord(question="What is the fee structure?", answer="Contact the office."),
        ],
        college=CollegeRecord(
            name="HSIT",
            address="Nidasoshi, Belagavi",
            phone="08333-278887",
            established=1996,
            affiliation="VTU",
            approved_by="AICTE",
        ),
        curriculum=[
            CurriculumRecord(branch="CSE", semester=3, subject="Data Structures"),
            CurriculumRecord(branch="CSE", semester=3, subject="Discrete Mathematics"),
        ],
    )


@pytest.fixture
def gemini_settings():
    return ProviderSettings(gemini_key="g-key", model_discovery=False)


@pytest.fixture
def no_llm_settings():
    return ProviderSettings()


@pytest.fixture
def timeout_error():
    return requests.exceptions.Timeout("timed out")
