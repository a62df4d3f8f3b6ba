"""
Minimal interactive CLI entrypoint for CollegeGPT.

Architectural role:
- Provides a terminal-only interface over the core Router.
- Keeps the conversation history for the session so LLM fallbacks see context.

Request lifecycle (per user turn, CLI):
1. Read a single line from stdin.
2. Handle local control commands (`exit`/`quit`, `empty chat`/`clear chat`).
3. Forward regular questions to `Router.answer` with the session history.
4. Print the reply tagged with its source (`db`, `llm`, `error`).

Input validation behavior:
- Empty input is ignored and does not call core.

Error handling strategy:
- Handles EOF and keyboard interrupts without traceback output.
- Configuration and hard store errors are printed as `error` replies; the
  session continues.
"""

import sys

from collegegpt.core.engine import build_router
from collegegpt.core.errors import ConfigurationError, StoreError
from collegegpt.core.routing_types import Reply


# =========================================================
# UTF-8 SAFE STDOUT
# Configures best-effort UTF-8 console output without failing startup.
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except (OSError, ValueError):
        pass


WELCOME = (
    "Hi! I'm CollegeGPT. Ask anything about the college: "
    "placements, faculty, admissions, and more."
)


def render(reply: Reply) -> str:
    return f"[{reply.source.value}] {reply.text}"


def ask(router, question: str, history: list[dict]) -> Reply:
    """Answer one turn and append both sides to `history`."""
    history.append({"role": "user", "content": question})
    try:
        reply = router.answer(question, history)
    except (ConfigurationError, StoreError) as err:
        reply = Reply.error(str(err))
    else:
        history.append({"role": "assistant", "content": reply.text})
    return reply


# =========================================================
# MAIN APPLICATION LOOP
# =========================================================

def main():
    """
    Run the interactive terminal session.

    Error handling strategy:
    - Router construction failures are fatal and reported once.
    - EOF and keyboard interrupts end the session gracefully.
    """
    try:
        router = build_router()
    except ConfigurationError as err:
        print(f"Configuration error: {err}")
        return 1

    history: list[dict] = []

    print(WELCOME)
    print("(Type 'exit' to quit)\n")
    print("-" * 60)

    while True:

        try:
            question = input("Question: ").strip()

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nInterrupted.")
            break

        if not question:
            continue

        if question.lower() in ("exit", "quit"):
            print("Shutting down.")
            break

        if question.lower() in ("empty chat", "clear chat"):
            history.clear()
            print("Chat cleared.")
            continue

        print()
        print(render(ask(router, question, history)))
        print("\n" + "-" * 60 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
