"""Pure parameter extractors used after an intent has been chosen.

Parsing rules:
- Every extractor takes question text and returns an optional value.
- `None` always means "not mentioned", which downstream lookup treats as an
  unconstrained filter.
- Extractors never raise on odd input.

Normalization steps:
- Department synonyms collapse to canonical codes (`computer`, `cse` -> `cs`).
- Years normalize to `YYYY-YY`.

Determinism:
- Fully deterministic given identical input and static vocabulary tables.
"""

import re

from collegegpt.nlp.domain_filter import DOMAIN_KEYWORDS


# =========================================================
# DEPARTMENTS
# =========================================================
# Ordered; first match wins. Longer phrases precede their prefixes.

DEPARTMENT_SYNONYMS = [
    ("computer science and engineering", "cs"),
    ("computer science", "cs"),
    ("computer", "cs"),
    ("cse", "cs"),
    ("cs", "cs"),
    ("electronics and communication", "ece"),
    ("ece", "ece"),
    ("electronics", "ece"),
    ("electrical", "eee"),
    ("eee", "eee"),
    ("mechanical", "mech"),
    ("mech", "mech"),
    ("civil", "civil"),
    ("management", "mba"),
    ("mba", "mba"),
    ("applied sciences", "applied sciences"),
]

_DEPARTMENT_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(s) for s, _ in DEPARTMENT_SYNONYMS) + r")(?:\s+engineering)?\b",
    re.IGNORECASE,
)

_DEPARTMENT_LOOKUP = dict(DEPARTMENT_SYNONYMS)


def extract_department(question: str) -> str | None:
    """Return the canonical department code mentioned in a question."""
    if not question:
        return None

    match = _DEPARTMENT_PATTERN.search(question)
    if not match:
        return None

    return _DEPARTMENT_LOOKUP[match.group(1).lower()]


# =========================================================
# PERSON NAMES
# =========================================================

NAME_STOPWORDS = {
    "the", "a", "an", "in", "on", "at", "of", "for", "and", "or", "with", "to",
    "is", "are", "was", "were", "by", "from", "me", "my", "i", "you", "your",
    "what", "who", "whom", "which", "where", "when", "how", "give", "show",
    "tell", "list", "all", "please", "get", "find", "details", "detail",
    "number", "id", "address", "name", "named", "about", "does", "do", "can",
    "whats", "s", "sir", "madam", "mr", "mrs", "ms", "dr", "prof",
}

_NON_NAME_WORDS = (
    NAME_STOPWORDS
    | set(DOMAIN_KEYWORDS)
    | {word for phrase, _ in DEPARTMENT_SYNONYMS for word in phrase.split()}
    | {"engineering", "branch"}
    | {"hod", "faculties", "teachers", "professors", "lecturers", "members"}
)

_ANCHORED_NAME = re.compile(
    r"\b(?:of|is|named|for)\s+([A-Z][A-Za-z.'`-]+(?:\s+[A-Z][A-Za-z.'`-]+)?)"
)
_CAPITALIZED_NAME = re.compile(r"\b([A-Z][a-z]{2,})(?:\s+([A-Z][a-z]{2,}))?\b")


def _is_name_token(token: str) -> bool:
    cleaned = token.strip(".'`-").lower()
    return len(cleaned) > 1 and cleaned not in _NON_NAME_WORDS


def _clean_candidate(candidate: str) -> str | None:
    """Drop leading/trailing non-name words from a multi-word candidate."""
    tokens = [t for t in candidate.split() if _is_name_token(t)]
    if not tokens:
        return None
    return " ".join(tokens)


def extract_person_name(question: str) -> str | None:
    """Extract a person name using anchored patterns before heuristics.

    Resolution order (first success wins):
        1. "of|is|named|for <Capitalized words>".
        2. Bare capitalized words anywhere in the question.
        3. Last token that is neither a stopword nor a domain/department term.

    Args:
        question: Original (case-preserving) question text.

    Returns:
        Name fragment or `None`.

    Edge cases:
        - Sentence-initial verbs such as "Show" are rejected by the stopword
          table, not by position.
        - Department codes ("CSE") never count as names.
    """
    if not question:
        return None

    for match in _ANCHORED_NAME.finditer(question):
        name = _clean_candidate(match.group(1))
        if name:
            return name

    for match in _CAPITALIZED_NAME.finditer(question):
        name = _clean_candidate(match.group(0))
        if name:
            return name

    tokens = [t for t in re.split(r"\W+", question) if t]
    for token in reversed(tokens):
        if _is_name_token(token) and not token.isdigit():
            return token

    return None


# =========================================================
# REQUESTED FIELD
# =========================================================

FIELD_RULES = [
    (re.compile(r"\b(?:e-?mail|mail id)\b"), "email"),
    (re.compile(r"\b(?:phone|mobile|contact)\b"), "phone"),
    (re.compile(r"\b(?:department|dept)\b"), "department"),
]


def extract_requested_field(question: str) -> str | None:
    """Return `email`, `phone`, or `department` when a single field is asked for."""
    if not question:
        return None

    q = question.lower()
    for pattern, field_name in FIELD_RULES:
        if pattern.search(q):
            return field_name
    return None


# =========================================================
# YEARS
# =========================================================

_YEAR_RANGE = re.compile(r"\b((?:19|20)\d{2})\s*[-–/]\s*(\d{2,4})\b")
_YEAR_SINGLE = re.compile(r"\b((?:19|20)\d{2})\b")

RELATIVE_YEAR_PHRASES = ("last year", "previous year", "last academic year")


def year_span(start: int) -> str:
    """Return the academic year starting in `start` as `YYYY-YY`."""
    return f"{start}-{(start + 1) % 100:02d}"


def parse_year(question: str) -> str | None:
    """Parse an academic year and normalize it to `YYYY-YY`.

    Accepted forms:
        - `2024-25`, `2024 - 25`, `2024-2025`, `2024/25`.
        - A bare `2024`, which becomes the span starting that year.

    Returns:
        Normalized year string, or `None` when the caller must resolve the
        latest available year.
    """
    if not question:
        return None

    match = _YEAR_RANGE.search(question)
    if match:
        return f"{match.group(1)}-{match.group(2)[-2:]}"

    match = _YEAR_SINGLE.search(question)
    if match:
        return year_span(int(match.group(1)))

    return None


def extract_year(question: str) -> str | None:
    """Like `parse_year`, but relative phrases always defer to the latest year."""
    if not question:
        return None
    if any(phrase in question.lower() for phrase in RELATIVE_YEAR_PHRASES):
        return None
    return parse_year(question)


# =========================================================
# COMPANY / SEMESTER / COLLEGE FACT
# =========================================================

_COMPANY = re.compile(
    r"\boffers?\s+(?:made\s+)?(?:from|at|by)\s+"
    r"([a-z0-9 .&+\-()/']+?)"
    r"(?=\s+(?:in|for|during|of)\b|\s+(?:19|20)\d{2}|[?!,]|\.\s|\.?$)",
    re.IGNORECASE,
)

_SEMESTER = re.compile(r"\bsem(?:ester)?\s*(\d{1,2})\b", re.IGNORECASE)

COLLEGE_FACT_RULES = [
    (re.compile(r"\b(?:address|where|location|located)\b"), "address"),
    (re.compile(r"\b(?:establish\w*|founded|started)\b"), "established"),
    (re.compile(r"\b(?:affiliat\w*|aicte|approved|university)\b"), "affiliation"),
]


def extract_company(question: str) -> str | None:
    """Extract the company named right after "offers from|at|by"."""
    if not question:
        return None

    match = _COMPANY.search(question)
    if not match:
        return None

    company = match.group(1).strip(" .")
    return company or None


def extract_semester(question: str) -> int | None:
    if not question:
        return None
    match = _SEMESTER.search(question)
    return int(match.group(1)) if match else None


def extract_college_fact(question: str) -> str | None:
    """Return which college fact was asked for: address, established, affiliation."""
    if not question:
        return None

    q = question.lower()
    for pattern, fact in COLLEGE_FACT_RULES:
        if pattern.search(q):
            return fact
    return None
