"""Rule-based lexical relevance gate.

Purpose:
    Decide whether a question falls inside the college domain before any
    structured lookup runs. Out-of-domain questions go straight to the LLM
    fallback; the structured store never answers something it has no
    authority over.

Validation model:
    - Rule-based only (word-boundary keyword matching), no model inference.
    - Output is a boolean gate consumed by `intent_router.classify`.

Determinism:
    For the same input text and keyword list, output is deterministic.

Bypass risk:
    Keyword matching misses paraphrases ("who teaches us?"). Such questions are
    answered by the LLM fallback, which is the safe direction to fail in.
"""

import re


DOMAIN_KEYWORDS = [

    # Institution
    "college", "campus", "hostel", "principal", "admission", "admissions",
    "fees", "fee",

    # People
    "faculty", "faculties", "staff", "professor", "professors", "teacher",
    "teachers", "lecturer", "lecturers", "hod",
    "department", "dept",

    # Contact
    "email", "phone", "mobile", "contact",

    # Placements
    "placement", "placements", "package", "offer", "offers", "recruiter",
    "recruiters", "company", "lpa", "salary",

    # College facts
    "address", "location", "located", "established", "founded", "affiliation",
    "affiliated", "aicte", "approved",

    # Curriculum
    "semester", "sem", "subject", "subjects", "syllabus", "curriculum",
]


_DOMAIN_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(k) for k in DOMAIN_KEYWORDS) + r")\b"
)


def is_in_domain(question: str) -> bool:
    """Return whether a question belongs to the college domain.

    Args:
        question: Raw or normalized user text.

    Returns:
        `True` when at least one curated keyword appears as a whole word.

    Edge cases:
        - Empty/None-like input is out of domain.
        - `sem1`-style tokens do not match `sem`; "sem 1" does.
    """
    if not question:
        return False

    return bool(_DOMAIN_PATTERN.search(question.lower()))
