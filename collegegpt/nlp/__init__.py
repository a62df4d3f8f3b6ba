"""NLP utilities for relevance gating, intent classification, and parameter extraction.

Module scope:
- Domain relevance gate (`domain_filter`).
- Ordered rule-based intent classification (`intent_router`).
- Pure parameter extractors (`extractors`).

Determinism profile:
- Entirely deterministic rule logic; no model-backed scoring.
"""
