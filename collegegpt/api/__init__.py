"""CollegeGPT API adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and status-code mapping.
- Delegates routing/generation to the core layer.

Scope:
- `http_api`: FastAPI application (`/chat`, `/ask`, `/answer`, `/testdb`).
- `main`: interactive terminal chat.
"""
