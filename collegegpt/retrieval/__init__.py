"""Retrieval package.

Architectural role:
    Provides the structured-data lookup used by core routing and the store
    backends it queries.

Scope:
    - `records`: read-only record types.
    - `store`: Supabase and local JSON snapshot backends.
    - `lookup`: `(intent, params) -> rows` with soft/hard failure policy.
"""
