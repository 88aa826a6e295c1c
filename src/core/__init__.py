"""
Core library: Reusable, broker-agnostic components.

Modules:
    resilience  - Exponential backoff and the async retry loop
    logging     - Structured JSON logging with context variables
    errors      - Error classification and exception hierarchy
    utils       - JSON serialization helpers

Design Principles:
    - No dependency on the nakadi resource modules
    - All modules are independently testable
    - Async-first where applicable
"""

from .types import ErrorCategory, TokenProvider

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
    "TokenProvider",
]
