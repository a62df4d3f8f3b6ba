"""Deterministic answer rendering from structured-lookup rows.

This module is intentionally narrow: it only turns already-fetched records into
reply text. Classification, store access, and LLM fallback happen elsewhere.

Design constraints:
    - Deterministic construction for identical inputs (no hidden state).
    - An empty string means "nothing to say"; the engine then defers to the LLM.
    - Missing data is never papered over with placeholders such as "N/A";
      absent fields are omitted, and an absent requested field yields "".

Numeric handling:
    Offer counts and salaries pass through `records.safe_number`, which strips
    non-numeric characters and falls back to zero instead of raising.
"""

from collections import OrderedDict
from typing import Any, Sequence

from collegegpt.core.routing_types import ExtractedParams, Intent
from collegegpt.retrieval.records import safe_number


FIELD_LABELS = {
    "email": "Email",
    "phone": "Phone",
    "department": "Department",
}


# =========================================================
# NUMBERS
# =========================================================

def format_number(value: float) -> str:
    """Render whole numbers without a trailing `.0`."""
    if value == int(value):
        return str(int(value))
    return str(value)


# =========================================================
# PLACEMENTS
# =========================================================

def _placement_year(params: ExtractedParams, rows: Sequence[Any]) -> str:
    return params.year or rows[0].year


def format_highest_package(params: ExtractedParams, rows: Sequence[Any]) -> str:
    if not rows:
        return ""
    row = rows[0]
    salary = format_number(safe_number(row.salary_lpa))
    return f"Highest package in {_placement_year(params, rows)} was {salary} LPA at {row.company_name}."


def format_company_offers(params: ExtractedParams, rows: Sequence[Any]) -> str:
    if not rows:
        return ""
    total = sum(safe_number(r.offers) for r in rows)
    return f"{rows[0].company_name} made {format_number(total)} offer(s) in {_placement_year(params, rows)}."


def format_placement_summary(params: ExtractedParams, rows: Sequence[Any]) -> str:
    """Render every company line plus computed total offers and highest salary."""
    if not rows:
        return ""

    lines = [
        f"{r.company_name} - {format_number(safe_number(r.offers))} offers, "
        f"Package: {format_number(safe_number(r.salary_lpa))} LPA"
        for r in rows
    ]
    total_offers = sum(safe_number(r.offers) for r in rows)
    highest = max(safe_number(r.salary_lpa) for r in rows)

    return (
        f"Placements for {_placement_year(params, rows)}: {', '.join(lines)}. "
        f"Total offers: {format_number(total_offers)}. "
        f"Highest: {format_number(highest)} LPA."
    )


# =========================================================
# FACULTY
# =========================================================

def pick_faculty_match(person_name: str | None, rows: Sequence[Any]) -> Any:
    """Prefer the row whose name contains `person_name`; else the first row."""
    if person_name:
        needle = person_name.lower()
        for row in rows:
            if row.name and needle in row.name.lower():
                return row
    return rows[0]


def format_faculty_field(params: ExtractedParams, rows: Sequence[Any]) -> str:
    """Render one field of one person; "" unless rows were narrowed by name or department."""
    if not rows or not (params.person_name or params.department):
        return ""

    match = pick_faculty_match(params.person_name, rows)
    value = match.get(params.requested_field)
    if not value:
        return ""

    label = FIELD_LABELS.get(params.requested_field, params.requested_field.title())
    return f"**{match.name}** — {label}: {value}"


def format_faculty_list(params: ExtractedParams, rows: Sequence[Any]) -> str:
    """Render a bulleted list; absent department/phone/email parts are omitted."""
    if not rows:
        return ""

    lines = []
    for r in rows:
        parts = []
        if r.department:
            parts.append(f"Dept: {r.department}")
        if r.phone:
            parts.append(f"Phone: {r.phone}")
        if r.email:
            parts.append(f"Email: {r.email}")
        line = f"- **{r.name}**"
        if parts:
            line += " — " + ", ".join(parts)
        lines.append(line)

    header = f"Faculty list — {params.department.upper()}" if params.department else "Faculty list"
    return f"**{header}**\n\n" + "\n".join(lines)


# =========================================================
# COLLEGE INFO / CURRICULUM / FAQ
# =========================================================

def format_college_info(params: ExtractedParams, rows: Sequence[Any]) -> str:
    """Render one templated sentence for the fact that was asked about.

    Edge cases:
        - The asked-for fact missing from the record -> "".
        - Unrecognized sub-question -> composite sentence from present fields.
    """
    if not rows:
        return ""

    college = rows[0]
    name = college.name or "The college"
    fact = params.college_fact

    if fact == "address":
        if not college.address:
            return ""
        text = f"{name} — {college.address}."
        if college.phone:
            text += f" Phone: {college.phone}."
        return text

    if fact == "established":
        if not college.established:
            return ""
        return f"{name} was established in {college.established}."

    if fact == "affiliation":
        if not college.affiliation and not college.approved_by:
            return ""
        parts = []
        if college.affiliation:
            parts.append(f"Affiliation: {college.affiliation}.")
        if college.approved_by:
            parts.append(f"Approved by: {college.approved_by}.")
        return " ".join(parts)

    clauses = []
    if college.address:
        clauses.append(f"is located at {college.address}")
    if college.established:
        clauses.append(f"was established in {college.established}")
    if college.affiliation:
        clauses.append(f"is affiliated to {college.affiliation}")
    if college.approved_by:
        clauses.append(f"is approved by {college.approved_by}")
    if not clauses:
        return ""
    if len(clauses) == 1:
        return f"{name} {clauses[0]}."
    return f"{name} {', '.join(clauses[:-1])} and {clauses[-1]}."


def format_curriculum(params: ExtractedParams, rows: Sequence[Any]) -> str:
    if not rows:
        return ""

    groups: "OrderedDict[tuple[str, int], list[str]]" = OrderedDict()
    for r in rows:
        groups.setdefault((r.branch, r.semester), []).append(r.subject)

    blocks = [
        f"Subjects for {branch} Semester {semester}:\n" + "\n".join(subjects)
        for (branch, semester), subjects in groups.items()
    ]
    return "\n\n".join(blocks)


def format_faq(params: ExtractedParams, rows: Sequence[Any]) -> str:
    if not rows:
        return ""
    return rows[0].answer or ""


# =========================================================
# DISPATCH
# =========================================================

def format_answer(intent: Intent, params: ExtractedParams, rows: Sequence[Any]) -> str:
    """Render reply text for an intent; "" means defer to the LLM."""
    if intent is Intent.FACULTY:
        if params.requested_field:
            return format_faculty_field(params, rows)
        return format_faculty_list(params, rows)

    renderer = _RENDERERS.get(intent)
    if renderer is None:
        return ""
    return renderer(params, rows)


_RENDERERS = {
    Intent.HIGHEST_PACKAGE: format_highest_package,
    Intent.COMPANY_OFFERS: format_company_offers,
    Intent.PLACEMENTS: format_placement_summary,
    Intent.COLLEGE_INFO: format_college_info,
    Intent.CURRICULUM: format_curriculum,
    Intent.FAQ: format_faq,
}
