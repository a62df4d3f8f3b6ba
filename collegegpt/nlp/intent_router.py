"""Intent classifier producing `(Intent, ExtractedParams)` for the engine.

Intent classification logic:
- Relevance first: questions failing `is_in_domain` map to `Intent.NONE` so the
  engine defers to the LLM immediately.
- In-domain questions are tested against `INTENT_RULES`, an ordered list of
  `(pattern, intent)` pairs. First match wins; there is no scoring across
  categories.
- In-domain questions matching no rule fall through to `Intent.FAQ`.
- Contact words alone ("phone number of the college") do not make a faculty
  question; a person, a department, or a faculty role word must be named.
- Placement questions are refined into `highest_package` / `company_offers`.

Parameter extraction:
- Delegated to the pure helpers in `collegegpt.nlp.extractors`; only the
  parameters relevant to the chosen intent are filled in.

Determinism:
- Fully deterministic for identical input.

Failure handling:
- Empty/blank input returns `(Intent.NONE, ExtractedParams())`; this is not an
  error.
"""

import logging
import re

from collegegpt.core.routing_types import ExtractedParams, Intent
from collegegpt.nlp.domain_filter import is_in_domain
from collegegpt.nlp.extractors import (
    extract_college_fact,
    extract_company,
    extract_department,
    extract_person_name,
    extract_requested_field,
    extract_semester,
    extract_year,
)


logger = logging.getLogger(__name__)


# =========================================================
# RULE TABLE (priority order is list order)
# =========================================================

INTENT_RULES = [
    (
        re.compile(
            r"\b(?:faculty|faculties|staff|professors?|teachers?|lecturers?|hod"
            r"|e-?mail|phone|mobile|contact)\b"
        ),
        Intent.FACULTY,
    ),
    (
        re.compile(
            r"\b(?:placements?|packages?|offers?|recruiters?|compan(?:y|ies)|lpa|salary)\b"
        ),
        Intent.PLACEMENTS,
    ),
    (
        re.compile(
            r"\b(?:address|location|located|establish\w*|founded|affiliat\w*|aicte|approved)\b"
        ),
        Intent.COLLEGE_INFO,
    ),
    (
        re.compile(r"\b(?:sem(?:ester)?|subjects?|syllabus|curriculum)\b"),
        Intent.CURRICULUM,
    ),
]

_HIGHEST = re.compile(r"\b(?:highest|max(?:imum)?|top|best)\b.*\b(?:package|salary|lpa)\b")
_OFFERS = re.compile(r"\boffers?\b")
_FACULTY_ROLE = re.compile(
    r"\b(?:faculty|faculties|staff|professors?|teachers?|lecturers?|hod)\b"
)


def match_rule(normalized_question: str, exclude: tuple = ()) -> Intent:
    """Return the first rule intent matching the question, else `Intent.FAQ`."""
    for pattern, intent in INTENT_RULES:
        if intent in exclude:
            continue
        if pattern.search(normalized_question):
            return intent
    return Intent.FAQ


def refine_placement_intent(normalized_question: str, company: str | None) -> Intent:
    """Split a placement question into highest-package, company-offers, or summary.

    Edge cases:
        - "offers" without an extractable company stays a summary request.
    """
    if _HIGHEST.search(normalized_question):
        return Intent.HIGHEST_PACKAGE
    if company and _OFFERS.search(normalized_question):
        return Intent.COMPANY_OFFERS
    return Intent.PLACEMENTS


def extract_faculty_params(original: str, normalized: str) -> ExtractedParams:
    """Fill the faculty filters; "department" is a requested field only for a named person."""
    params = ExtractedParams(normalized_question=normalized)
    params.department = extract_department(original)
    params.person_name = extract_person_name(original)
    params.requested_field = extract_requested_field(normalized)
    if params.requested_field == "department" and not params.person_name:
        params.requested_field = None
    return params


def classify(question: str) -> tuple[Intent, ExtractedParams]:
    """
    Classify a raw question and extract the parameters its intent needs.

    Parsing rules:
    1. Blank or out-of-domain input -> `(Intent.NONE, ExtractedParams())`.
    2. `INTENT_RULES` in order; first match wins; no match -> FAQ.
    3. A faculty match made only by contact words ("phone", "email") stands
       only when a person or department is named; otherwise the remaining
       rules are tried.
    4. Parameters are extracted from the original text (names need case) or
       the normalized text (everything else).
    """
    if not question or not question.strip():
        return Intent.NONE, ExtractedParams()

    original = question.strip()
    normalized = original.lower()

    if not is_in_domain(normalized):
        logger.info("Question out of domain; deferring to LLM")
        return Intent.NONE, ExtractedParams()

    intent = match_rule(normalized)
    params = ExtractedParams(normalized_question=normalized)

    if intent is Intent.FACULTY:
        params = extract_faculty_params(original, normalized)
        names_someone = params.person_name or params.department
        if not names_someone and not _FACULTY_ROLE.search(normalized):
            logger.info("Contact question names no faculty member; trying other rules")
            intent = match_rule(normalized, exclude=(Intent.FACULTY,))
            params = ExtractedParams(normalized_question=normalized)

    if intent is Intent.PLACEMENTS:
        params.year = extract_year(original)
        params.company = extract_company(normalized)
        intent = refine_placement_intent(normalized, params.company)

    elif intent is Intent.COLLEGE_INFO:
        params.college_fact = extract_college_fact(normalized)

    elif intent is Intent.CURRICULUM:
        params.department = extract_department(original)
        params.semester = extract_semester(normalized)

    logger.info("Classified question as %s", intent.value)
    return intent, params
