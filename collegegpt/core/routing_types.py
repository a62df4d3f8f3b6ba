"""Routing data contracts shared by classifier, lookup, formatter, and engine.

Architectural role:
    Defines the minimal schema produced by question classification
    (`collegegpt.nlp.intent_router.classify`) and consumed by the structured
    lookup, the answer formatter, and the orchestration engine.

Control-flow interaction:
    `engine.Router` inspects `Intent` to decide whether the structured path runs
    at all (`Intent.NONE` skips it) and tags every returned `Reply` with the
    source that produced it.

Determinism:
    The data classes are purely structural and state-free. All instances live for
    the duration of a single request.
"""

from dataclasses import dataclass
from enum import Enum


class Intent(str, Enum):
    """Discrete purpose of a question."""

    FACULTY = "faculty"
    PLACEMENTS = "placements"
    HIGHEST_PACKAGE = "highest_package"
    COMPANY_OFFERS = "company_offers"
    COLLEGE_INFO = "college_info"
    CURRICULUM = "curriculum"
    FAQ = "faq"
    NONE = "none"


PLACEMENT_INTENTS = (Intent.PLACEMENTS, Intent.HIGHEST_PACKAGE, Intent.COMPANY_OFFERS)


class ReplySource(str, Enum):
    DB = "db"
    LLM = "llm"
    ERROR = "error"


@dataclass
class ExtractedParams:
    """Optional filters extracted from a question.

    Every field is optional; `None` means "unconstrained filter".

    Attributes:
        department: Canonical department code (for example `cs`).
        person_name: Person name as written in the question.
        requested_field: One of `email`, `phone`, `department`.
        year: Academic year in `YYYY-YY` form; `None` means "latest available".
        company: Company name fragment for offer lookups.
        semester: Semester number for curriculum lookups.
        college_fact: One of `address`, `established`, `affiliation`.
        normalized_question: Lower-cased, trimmed question text.
    """

    department: str | None = None
    person_name: str | None = None
    requested_field: str | None = None
    year: str | None = None
    company: str | None = None
    semester: int | None = None
    college_fact: str | None = None
    normalized_question: str = ""


@dataclass
class Reply:
    """Unit returned to API callers.

    An empty `text` is the in-band "no structured answer" signal.
    """

    text: str = ""
    source: ReplySource = ReplySource.DB

    @classmethod
    def error(cls, message: str) -> "Reply":
        return cls(text=message, source=ReplySource.ERROR)
