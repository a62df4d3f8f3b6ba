"""Core request orchestration: classify -> lookup -> format -> LLM fallback.

Architectural role:
    Provides the main execution pipeline used by API/CLI layers to turn one user
    question (plus its conversation history) into a tagged `Reply`.

Control-flow model (linear, no state is re-entered):
    1. CLASSIFY: `intent_router.classify`. `Intent.NONE` jumps to step 4.
    2. LOOKUP: `StructuredLookup.lookup` with the classified parameters.
    3. FORMAT: `answer_formatter.format_answer`. Non-empty text returns
       `Reply(source=db)`.
    4. LLM: `generate_reply` with the full history. Upstream failures degrade to
       the apology text, still tagged `llm`.

Failure policy:
    The store layer is soft (errors become "no rows") whenever an LLM fallback is
    configured and hard otherwise, so a hard `StoreError` only reaches the caller
    when there is nothing to fall back to. `ConfigurationError` propagates.

Dependency injection:
    The store, lookup, and LLM client are constructor parameters.
    `build_router` wires the environment-configured defaults.

Determinism:
    Steps 1-3 are deterministic for fixed store contents. Step 4 is not.
"""

import logging

from collegegpt.core.routing_types import Intent, Reply, ReplySource
from collegegpt.formatting.answer_formatter import format_answer
from collegegpt.llm.service import LLMFallbackClient, generate_reply
from collegegpt.nlp.intent_router import classify
from collegegpt.retrieval.lookup import StructuredLookup
from collegegpt.retrieval.store import CollegeStore, build_store, load_store_settings


logger = logging.getLogger(__name__)


def latest_user_message(history: list[dict]) -> str:
    """Return the content of the most recent user turn, or ""."""
    for msg in reversed(history or []):
        if isinstance(msg, dict) and msg.get("role") == "user":
            return str(msg.get("content", ""))
    return ""


class Router:
    """Composition point for the structured path and the LLM fallback."""

    def __init__(self, lookup: StructuredLookup, llm: LLMFallbackClient) -> None:
        self.lookup = lookup
        self.llm = llm

    def resolve(self, question: str) -> str:
        """Run the structured path only; "" means "no structured answer".

        Raises:
            StoreError: Only when the lookup is configured with hard failures.
        """
        intent, params = classify(question)
        if intent is Intent.NONE:
            return ""

        rows = self.lookup.lookup(intent, params)
        text = format_answer(intent, params, rows)
        logger.info("Structured path intent=%s rows=%d answered=%s", intent.value, len(rows), bool(text))
        return text

    def answer(self, question: str, history: list[dict] | None = None) -> Reply:
        """Answer one question, deferring to the LLM when the store has nothing.

        Args:
            question: Latest user question.
            history: Full conversation including the latest question. When
                omitted, a single-turn history is built from `question`.

        Raises:
            ConfigurationError: The LLM step is needed but no provider keys exist.
            StoreError: Hard store failure (no LLM fallback configured).
        """
        text = self.resolve(question)
        if text:
            return Reply(text=text, source=ReplySource.DB)

        conversation = list(history) if history else [{"role": "user", "content": question}]
        reply_text = generate_reply(conversation, self.llm)
        return Reply(text=reply_text, source=ReplySource.LLM)


def build_router(store: CollegeStore | None = None, llm: LLMFallbackClient | None = None) -> Router:
    """Wire a `Router` from environment configuration.

    Store failures are soft exactly when the LLM client has credentials.
    """
    store_settings = load_store_settings()
    llm = llm or LLMFallbackClient()
    store = store or build_store(store_settings)

    lookup = StructuredLookup(
        store,
        soft_failures=llm.configured,
        default_placement_year=store_settings.default_placement_year,
    )
    return Router(lookup, llm)
