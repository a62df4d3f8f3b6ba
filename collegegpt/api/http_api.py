"""
HTTP API adapter for the CollegeGPT engine.

Architectural role:
- Expose the chat, structured-answer, and combined routes consumed by the web UI.
- Enforce adapter-level input shaping and status-code mapping.
- Delegate routing/generation to `collegegpt.core.engine` and `collegegpt.llm.service`.

Endpoint responsibilities:
- `POST /chat`: LLM fallback over the full message history.
- `POST /ask`: structured path only; `reply: ""` tells the caller to use `/chat`.
- `POST /answer`: full Router (structured first, LLM fallback) returning the source.
- `GET /testdb`: store health probe (one placement row).

Input validation behavior:
- Bodies are parsed into pydantic models; missing fields default to empty.
- Non-POST calls to POST routes -> HTTP 405 `{message}`.

Error handling strategy:
- `ConfigurationError` -> HTTP 500 `{message}` (no provider keys, bad store config).
- `StoreError` -> HTTP 500 `{message}`; only reaches here when no LLM fallback
  is configured, because the lookup degrades softly otherwise.
- Upstream provider failures never reach this module; they arrive as the
  apology text with HTTP 200.

Side effects:
- Builds a fresh store client and LLM client per request (no shared state).
- Emits debug prints only when `DEBUG == "true"`.
- Loads environment variables at import time via `load_dotenv()`.
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from collegegpt.core.engine import Router, build_router, latest_user_message
from collegegpt.core.errors import ConfigurationError, StoreError
from collegegpt.core.routing_types import ReplySource
from collegegpt.llm.service import LLMFallbackClient, generate_reply
from collegegpt.retrieval.store import CollegeStore, build_store


logger = logging.getLogger(__name__)

app = FastAPI(title="CollegeGPT API")
# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"


# ============================================================
# Request Schema
# ============================================================

class ChatMessage(BaseModel):
    role: str = "user"
    content: str = ""


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = []


class AskRequest(BaseModel):
    question: str = ""


def _history(payload: ChatRequest) -> list[dict]:
    return [m.model_dump() for m in payload.messages]


# ============================================================
# Dependencies (overridable in tests)
# ============================================================

def get_llm_client() -> LLMFallbackClient:
    return LLMFallbackClient()


def get_store() -> CollegeStore:
    return build_store()


def get_router(
    store: CollegeStore = Depends(get_store),
    llm: LLMFallbackClient = Depends(get_llm_client),
) -> Router:
    return build_router(store=store, llm=llm)


# ============================================================
# Error Mapping
# ============================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"message": "Method not allowed"})
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"message": str(exc), "source": ReplySource.ERROR.value},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"message": str(exc) or "Server error", "source": ReplySource.ERROR.value},
    )


# ============================================================
# Routes
# ============================================================

@app.post("/chat")
async def chat(payload: ChatRequest, llm: LLMFallbackClient = Depends(get_llm_client)):
    """
    LLM fallback endpoint.

    Response formatting:
    - `200 {reply}` for every outcome that produces text, including the apology.
    - `500 {message}` when no provider credentials are configured.
    """
    history = _history(payload)

    if DEBUG:
        print("\n==== /chat DEBUG ====")
        print("Incoming messages:", history)

    if not llm.configured:
        raise ConfigurationError("No GEMINI_API_KEY or OPENAI_API_KEY configured.")

    reply = await asyncio.to_thread(generate_reply, history, llm)
    return {"reply": reply}


@app.post("/ask")
async def ask(payload: AskRequest, router: Router = Depends(get_router)):
    """
    Structured-only endpoint.

    `reply: ""` signals "no structured answer, caller should invoke the LLM path".
    """
    question = payload.question.strip()

    if DEBUG:
        print("\n==== /ask DEBUG ====")
        print("Question:", question)

    if not question:
        return {"reply": ""}

    reply = await asyncio.to_thread(router.resolve, question)
    return {"reply": reply}


@app.post("/answer")
async def answer(payload: ChatRequest, router: Router = Depends(get_router)):
    """
    Combined endpoint: structured answer first, LLM fallback with full history.
    """
    history = _history(payload)
    question = latest_user_message(history)

    result = await asyncio.to_thread(router.answer, question, history)

    if DEBUG:
        print("\n==== /answer DEBUG ====")
        print("Question:", question)
        print("Source:", result.source.value)

    return {"reply": result.text, "source": result.source.value}


@app.get("/testdb")
def testdb(store: CollegeStore = Depends(get_store)):
    """Fetch one placement row to verify store connectivity."""
    try:
        probe = store.probe()
    except StoreError as err:
        return JSONResponse(status_code=500, content={"ok": False, "error": str(err)})
    return {"ok": True, **probe}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
