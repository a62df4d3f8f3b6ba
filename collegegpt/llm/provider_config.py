"""Provider/runtime configuration for the LLM fallback layer.

Architectural role:
    Centralizes model/provider selection, endpoint URLs, timeouts, and credential
    lookup for `collegegpt.llm.client` and `collegegpt.llm.service`.

Model call flow integration:
    - `service.LLMFallbackClient` reads `ProviderSettings` to decide which
      attempt strategies exist and whether discovery runs.
    - `client` consumes endpoint templates and timeouts.

Determinism:
    Deterministic for a fixed process environment and key files. Settings are
    read at call time (`load_provider_settings`), not at import time.

Failure behavior:
    Missing key material is represented as `None`. The absence of every key is
    reported by the service as `ConfigurationError`.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1"
GEMINI_LIST_MODELS_URL = f"{GEMINI_API_BASE}/models"
GEMINI_GENERATE_URL_TEMPLATE = GEMINI_API_BASE + "/{model}:generateContent"

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

DEFAULT_GEMINI_MODEL = "models/gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

APOLOGY_MESSAGE = (
    "Sorry, I couldn't reach the model right now. Please try again in a few minutes."
)

KEY_FILES = {
    "gemini": "config/gemini.key",
    "openai": "config/openai.key",
}


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/gemini.key` -> `GEMINI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value.strip()
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ProviderSettings:
    """Credentials and call limits for the generative providers.

    Relevant environment variables:
        - `GEMINI_API_KEY`, `OPENAI_API_KEY` (or `config/*.key` files)
        - `GEMINI_MODEL`, `OPENAI_MODEL`, `OPENAI_MAX_TOKENS`
        - `LLM_TIMEOUT_SECONDS`, `LLM_DISCOVERY_TIMEOUT_SECONDS`
        - `LLM_MODEL_DISCOVERY`
    """

    gemini_key: str | None = None
    openai_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_max_tokens: int = 512
    timeout_seconds: float = 20.0
    discovery_timeout_seconds: float = 8.0
    model_discovery: bool = True

    @property
    def has_credentials(self) -> bool:
        return bool(self.gemini_key or self.openai_key)


def load_provider_settings() -> ProviderSettings:
    """Read `ProviderSettings` from the current environment and key files."""
    return ProviderSettings(
        gemini_key=load_key(KEY_FILES["gemini"]),
        openai_key=load_key(KEY_FILES["openai"]),
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        openai_max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "512")),
        timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "20")),
        discovery_timeout_seconds=float(os.getenv("LLM_DISCOVERY_TIMEOUT_SECONDS", "8")),
        model_discovery=_env_bool("LLM_MODEL_DISCOVERY", True),
    )
