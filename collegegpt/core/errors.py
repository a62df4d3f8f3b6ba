"""Exception taxonomy for the routing pipeline.

Recovery model:
    - `ConfigurationError` is fatal and surfaced by API adapters as HTTP 500.
    - `StoreError` is soft (converted to "no rows") whenever an LLM fallback is
      configured, and hard otherwise.
    - `UpstreamError` and its subclasses are recovered by the provider fallback
      chain and finally by a fixed apology text; they never reach the UI.
"""


class CollegeGPTError(Exception):
    """Base class for all package errors."""


class ConfigurationError(CollegeGPTError):
    """Required credentials or settings are missing."""


class StoreError(CollegeGPTError):
    """Structured store unreachable, timed out, or returned a malformed response."""


class UpstreamError(CollegeGPTError):
    """Generative provider call did not yield usable text."""


class UpstreamTransientError(UpstreamError):
    """Bad status, timeout, or transport failure from a generative provider."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(UpstreamError):
    """Provider answered with success but no extractable text."""
