"""LLM fallback client: ordered provider attempts ending in a fixed apology.

Architectural role:
    Canonical entrypoint used by the engine and the `/chat` endpoint when the
    structured path has no answer. Bridges provider settings to the transport
    functions in `collegegpt.llm.client`.

Model call flow:
    optional model discovery -> Gemini (header auth) -> Gemini (query auth, only
    after a non-success status) -> OpenAI-style secondary provider -> apology.

Retry behavior:
    The query-auth step is an auth-transport fallback, not a backoff retry:
    exactly one retry, no delay. All calls are strictly sequential.

Failure scenarios:
    - No credentials at all -> `ConfigurationError` (never retried).
    - Every attempt failed -> `UpstreamError` from `complete`, converted to the
      apology text by `generate_reply`.
"""

import logging
from functools import partial
from typing import Any

import requests

from collegegpt.core.errors import ConfigurationError, UpstreamError
from collegegpt.llm.client import (
    Attempt,
    after_bad_status,
    call_gemini,
    call_openai,
    discover_gemini_model,
)
from collegegpt.llm.provider_config import (
    APOLOGY_MESSAGE,
    ProviderSettings,
    load_provider_settings,
)


logger = logging.getLogger(__name__)


class LLMFallbackClient:
    """Generative-text client iterating provider attempts until one succeeds."""

    def __init__(self, settings: ProviderSettings | None = None, http: Any = None) -> None:
        """
        Args:
            settings: Provider settings; read from the environment when omitted.
            http: Object exposing `get`/`post` with `requests` semantics. Defaults
                to the `requests` module itself.
        """
        self.settings = settings or load_provider_settings()
        self.http = http or requests

    @property
    def configured(self) -> bool:
        return self.settings.has_credentials

    def resolve_gemini_model(self) -> str:
        """Pick the Gemini model, using discovery when enabled."""
        s = self.settings
        if s.model_discovery:
            discovered = discover_gemini_model(self.http, s.gemini_key, s.discovery_timeout_seconds)
            if discovered:
                return discovered
        return s.gemini_model

    def build_attempts(self) -> list[Attempt]:
        """Return the ordered attempt list for the configured credentials."""
        s = self.settings
        attempts: list[Attempt] = []

        if s.gemini_key:
            model = self.resolve_gemini_model()
            logger.info("Using Gemini model: %s", model)
            gemini = partial(call_gemini, self.http, model, s.gemini_key, timeout=s.timeout_seconds)
            attempts.append(Attempt("gemini/header", partial(gemini, auth="header")))
            attempts.append(Attempt("gemini/query", partial(gemini, auth="query"), when=after_bad_status))

        if s.openai_key:
            attempts.append(
                Attempt(
                    "openai",
                    partial(
                        call_openai,
                        self.http,
                        s.openai_model,
                        s.openai_key,
                        timeout=s.timeout_seconds,
                        max_tokens=s.openai_max_tokens,
                    ),
                )
            )

        return attempts

    def complete(self, history: list[dict]) -> str:
        """Return reply text for the full conversation history.

        Raises:
            ConfigurationError: No provider credentials configured.
            UpstreamError: Every applicable attempt failed.
        """
        if not self.configured:
            raise ConfigurationError("No GEMINI_API_KEY or OPENAI_API_KEY configured.")

        previous: Exception | None = None

        for attempt in self.build_attempts():
            if not attempt.applies(previous):
                continue
            try:
                return attempt.call(history)
            except UpstreamError as err:
                logger.warning("LLM attempt %s failed: %s", attempt.name, err)
                previous = err

        raise UpstreamError("All LLM provider attempts failed") from previous


def generate_reply(history: list[dict], client: LLMFallbackClient | None = None) -> str:
    """Return LLM reply text, degrading every upstream failure to the apology.

    Raises:
        ConfigurationError: Propagated unchanged; callers report it as HTTP 500.
    """
    client = client or LLMFallbackClient()
    try:
        return client.complete(history)
    except UpstreamError:
        logger.error("All LLM providers failed; returning apology", exc_info=True)
        return APOLOGY_MESSAGE
