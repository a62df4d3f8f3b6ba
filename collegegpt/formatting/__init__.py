"""Answer formatting package.

This package contains deterministic reply-construction helpers used by the core
orchestration layer. It does not perform classification, store access, or model
invocation.
"""
