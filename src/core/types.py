"""
Core types and protocols used across modules.

This module provides base types, enums, and protocol definitions that are
shared across the core library to ensure consistency and type safety.
"""

from enum import Enum
from typing import Protocol


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed on a later attempt
                   (e.g., connection refused, DNS failure, timeouts, 5xx)
        AUTH: Authentication failures (401)
        PERMANENT: Definitive rejections that won't succeed on retry
                   (e.g., 404, 422, malformed response bodies)
        CANCELLED: The caller asked the operation to stop
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class TokenProvider(Protocol):
    """
    Protocol for authentication token providers.

    The client only attaches the token; acquiring and refreshing it is the
    provider's job.
    """

    async def get_token(self) -> str:
        """
        Get an access token for the broker.

        Returns:
            Access token string
        """
        ...


__all__ = [
    "ErrorCategory",
    "TokenProvider",
]
