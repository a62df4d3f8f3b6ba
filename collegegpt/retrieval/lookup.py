"""Structured-data lookup: `(intent, params) -> rows`.

Architectural role:
    Translates classified parameters into `CollegeStore` queries and returns the
    matching records for the answer formatter. Ranking is delegated to the store
    except for FAQ matching, which is scored here.

Query rules:
    - faculty: partial department AND partial name filters; department-only
      listings are sorted by name.
    - placements / highest_package / company_offers: an unset year is resolved
      to the latest year in the store, then to `default_placement_year`.
    - faq: token-overlap scoring over the full FAQ table; strictly highest score
      wins, ties keep store order, zero never matches.
    - college_info / curriculum: single record / filtered subject rows.

Failure handling:
    `StoreError` is soft (logged, converted to `[]`) when `soft_failures` is set,
    which the engine does whenever an LLM fallback is configured. Otherwise it
    propagates to the caller.

Determinism:
    Deterministic for fixed store contents.
"""

import logging
import re
from typing import Any

from collegegpt.core.errors import StoreError
from collegegpt.core.routing_types import ExtractedParams, Intent, PLACEMENT_INTENTS
from collegegpt.retrieval.records import FaqRecord
from collegegpt.retrieval.store import CollegeStore, StoreSettings


logger = logging.getLogger(__name__)


# Function words never count toward FAQ overlap.
FAQ_STOPWORDS = {
    "a", "an", "the", "is", "are", "was", "were", "be", "of", "in", "on", "at",
    "to", "for", "and", "or", "it", "this", "that", "there", "any", "what",
    "which", "who", "how", "when", "do", "does", "can", "i", "me", "my", "you",
    "your", "we", "our",
}


def _tokens(text: str) -> set[str]:
    return {
        t for t in re.split(r"\W+", (text or "").lower())
        if t and t not in FAQ_STOPWORDS
    }


def best_faq_match(normalized_question: str, faqs: list[FaqRecord]) -> FaqRecord | None:
    """Return the FAQ row sharing the most words with the question.

    Ranking logic:
        Score = number of distinct question words (function words excluded)
        present in the FAQ question.
        Only a strictly higher score replaces the current best, so ties keep the
        first-seen row.

    Edge cases:
        - Empty question or FAQ table returns `None`.
        - A best score of zero returns `None`.
    """
    question_words = _tokens(normalized_question)
    if not question_words:
        return None

    best = None
    best_score = 0

    for row in faqs:
        score = len(question_words & _tokens(row.question))
        if score > best_score:
            best = row
            best_score = score

    return best


class StructuredLookup:
    """Run store queries for one classified question."""

    def __init__(
        self,
        store: CollegeStore,
        soft_failures: bool = True,
        default_placement_year: str = StoreSettings.default_placement_year,
    ) -> None:
        self.store = store
        self.soft_failures = soft_failures
        self.default_placement_year = default_placement_year

    def lookup(self, intent: Intent, params: ExtractedParams) -> list[Any]:
        """Return records answering `(intent, params)`; may be empty.

        Raises:
            StoreError: Only when `soft_failures` is false.
        """
        try:
            return self._dispatch(intent, params)
        except StoreError:
            if not self.soft_failures:
                raise
            logger.warning("Store lookup failed for intent=%s; degrading to no rows", intent.value, exc_info=True)
            return []

    def resolve_year(self, year: str | None) -> str:
        """Return `year`, else the latest stored year, else the default literal."""
        if year:
            return year
        latest = self.store.latest_placement_year()
        return latest or self.default_placement_year

    def _dispatch(self, intent: Intent, params: ExtractedParams) -> list[Any]:
        if intent is Intent.FACULTY:
            listing = bool(params.department) and not params.person_name
            return self.store.faculty(
                params.department,
                params.person_name,
                order_by_name=listing,
            )

        if intent in PLACEMENT_INTENTS:
            year = self.resolve_year(params.year)
            if intent is Intent.HIGHEST_PACKAGE:
                return self.store.placements(year, highest_only=True)
            if intent is Intent.COMPANY_OFFERS:
                return self.store.placements(year, company=params.company)
            return self.store.placements(year)

        if intent is Intent.FAQ:
            match = best_faq_match(params.normalized_question, self.store.faqs())
            return [match] if match else []

        if intent is Intent.COLLEGE_INFO:
            record = self.store.college_info()
            return [record] if record else []

        if intent is Intent.CURRICULUM:
            return self.store.curriculum(params.department, params.semester)

        return []
