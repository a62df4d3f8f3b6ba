"""Provider-specific transport for generative fallback requests.

Architectural role:
    Executes HTTP requests against the Gemini and OpenAI-compatible endpoints and
    normalizes their responses to plain text. `service.LLMFallbackClient` composes
    these calls into an ordered list of `Attempt` strategies.

Model invocation flow:
    history -> payload remap (Gemini `contents` / OpenAI `messages`) ->
    `requests` call with per-call timeout -> first candidate text.

Retry behavior:
    No retry loop lives here. Each function performs exactly one HTTP call; the
    attempt list in `service` decides what runs next.

Failure handling model:
    - Non-2xx status or transport error/timeout -> `UpstreamTransientError`.
    - 2xx with missing/empty text or non-JSON body -> `MalformedResponse`.
    - `discover_gemini_model` never raises; failures are logged and return `None`.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

import requests

from collegegpt.core.errors import MalformedResponse, UpstreamTransientError
from collegegpt.llm.provider_config import (
    GEMINI_GENERATE_URL_TEMPLATE,
    GEMINI_LIST_MODELS_URL,
    OPENAI_CHAT_URL,
)


logger = logging.getLogger(__name__)


# =========================================================
# PAYLOAD MAPPING
# =========================================================

def to_gemini_contents(history: list[dict]) -> list[dict]:
    """Map chat history to Gemini `contents`; non-user roles become `model`."""
    contents = []
    for msg in history:
        if not isinstance(msg, dict):
            continue
        content = msg.get("content", "")
        if not content:
            continue
        role = "user" if msg.get("role") == "user" else "model"
        contents.append({"role": role, "parts": [{"text": str(content)}]})
    return contents


def to_openai_messages(history: list[dict]) -> list[dict]:
    """Map chat history to OpenAI chat messages; non-user roles become `assistant`."""
    messages = []
    for msg in history:
        if not isinstance(msg, dict):
            continue
        role = "user" if msg.get("role") == "user" else "assistant"
        messages.append({"role": role, "content": str(msg.get("content", ""))})
    return messages


def extract_gemini_text(data: Any) -> str | None:
    """Return the first candidate's first text part, or `None`."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text.strip() else None


def extract_openai_text(data: Any) -> str | None:
    try:
        text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text.strip() else None


def normalize_model_name(model: str) -> str:
    return model if model.startswith("models/") else f"models/{model}"


# =========================================================
# HTTP HELPERS
# =========================================================

def _send(http: Any, method: str, provider: str, url: str, **kwargs) -> Any:
    """Perform one request and return parsed JSON.

    Raises:
        UpstreamTransientError: Transport failure, timeout, or non-2xx status.
        MalformedResponse: 2xx body that is not JSON.
    """
    try:
        response = getattr(http, method)(url, **kwargs)
    except requests.exceptions.RequestException as err:
        raise UpstreamTransientError(f"{provider} request failed: {err}") from err

    if not response.ok:
        raise UpstreamTransientError(
            f"{provider} error {response.status_code}: {response.text[:300]}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as err:
        raise MalformedResponse(f"{provider} returned a non-JSON body") from err


# =========================================================
# PROVIDER CALLS
# =========================================================

def discover_gemini_model(http: Any, api_key: str, timeout: float) -> str | None:
    """Return the first listed model supporting `generateContent`, or `None`.

    Failure handling:
        Any failure (status, transport, shape) is logged and yields `None`; the
        caller then uses its configured default model.
    """
    try:
        data = _send(
            http,
            "get",
            "gemini",
            GEMINI_LIST_MODELS_URL,
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except (UpstreamTransientError, MalformedResponse) as err:
        logger.warning("Gemini model discovery failed: %s", err)
        return None

    models = data.get("models", []) if isinstance(data, dict) else []
    for model in models:
        if not isinstance(model, dict):
            continue
        methods = (
            model.get("supportedGenerationMethods")
            or model.get("supported_generation_methods")
            or []
        )
        if "generateContent" in methods and model.get("name"):
            return model["name"]

    logger.warning("Gemini model discovery returned no generateContent-capable model")
    return None


def call_gemini(
    http: Any,
    model: str,
    api_key: str,
    history: list[dict],
    timeout: float,
    auth: str = "header",
) -> str:
    """Call Gemini `generateContent` once.

    Args:
        auth: `header` sends `x-goog-api-key`; `query` sends `?key=`.
    """
    url = GEMINI_GENERATE_URL_TEMPLATE.format(model=normalize_model_name(model))
    headers = {"Content-Type": "application/json"}
    params = None

    if auth == "header":
        headers["x-goog-api-key"] = api_key
    else:
        params = {"key": api_key}

    data = _send(
        http,
        "post",
        "gemini",
        url,
        headers=headers,
        params=params,
        json={"contents": to_gemini_contents(history)},
        timeout=timeout,
    )

    text = extract_gemini_text(data)
    if text is None:
        raise MalformedResponse("gemini returned no textual candidate")
    return text.strip()


def call_openai(
    http: Any,
    model: str,
    api_key: str,
    history: list[dict],
    timeout: float,
    max_tokens: int = 512,
) -> str:
    """Call an OpenAI-style chat-completions endpoint once."""
    data = _send(
        http,
        "post",
        "openai",
        OPENAI_CHAT_URL,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        },
        json={
            "model": model,
            "messages": to_openai_messages(history),
            "max_tokens": max_tokens,
        },
        timeout=timeout,
    )

    text = extract_openai_text(data)
    if text is None:
        raise MalformedResponse("openai returned no message content")
    return text.strip()


# =========================================================
# ATTEMPT STRATEGIES
# =========================================================

def after_bad_status(previous: Exception | None) -> bool:
    """Run only when the previous attempt got a non-success HTTP status."""
    return isinstance(previous, UpstreamTransientError) and previous.status_code is not None


@dataclass(frozen=True)
class Attempt:
    """One step of the provider fallback chain.

    Attributes:
        name: Label used in logs.
        call: Callable mapping chat history to reply text; raises `UpstreamError`.
        when: Optional predicate over the previous attempt's error. `None` means
            the attempt always runs when reached.
    """

    name: str
    call: Callable[[list[dict]], str]
    when: Callable[[Exception | None], bool] | None = None

    def applies(self, previous: Exception | None) -> bool:
        return self.when is None or self.when(previous)
