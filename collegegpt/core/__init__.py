"""Core orchestration package.

Architectural role:
    Exposes the request-orchestration layer that sits between API/CLI entrypoints
    and lower-level subsystems (classification, structured lookup, answer
    formatting, and LLM fallback).

Composition:
    - `engine`: Router implementing classify -> lookup -> format -> LLM.
    - `routing_types`: Shared intent/params/reply schema.
    - `errors`: Exception taxonomy used across layers.

Determinism and side effects:
    Package import itself is deterministic and side-effect free.
"""
