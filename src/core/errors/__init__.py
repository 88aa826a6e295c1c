"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- NakadiError hierarchy for typed exceptions
- Classification utilities for retry decisions
"""

from core.errors.exceptions import (
    ConnectionError,
    DecodeError,
    # Enums
    ErrorCategory,
    # Base classes
    NakadiError,
    OperationCancelledError,
    RemoteError,
    RetryExhaustedError,
    # Classification utilities
    classify_http_status,
    is_transient_error,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "NakadiError",
    # Classified errors
    "ConnectionError",
    "DecodeError",
    "RemoteError",
    "RetryExhaustedError",
    "OperationCancelledError",
    # Classification utilities
    "classify_http_status",
    "is_transient_error",
]
