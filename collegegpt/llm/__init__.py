"""LLM fallback package.

Architectural role:
    Provides provider configuration, transport adapters, and the ordered fallback
    chain used when the structured path yields no answer.

Module split:
    - `provider_config`: environment-driven provider settings and key lookup.
    - `client`: Gemini/OpenAI HTTP transport, response parsing, attempt type.
    - `service`: `LLMFallbackClient` and the apology-degrading `generate_reply`.
"""
