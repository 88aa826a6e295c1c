"""
Exception hierarchy for broker API operations.

Every failed operation surfaces exactly one of these, with a category that
drives the retry decision:
- ConnectionError: no response received (transient)
- DecodeError: response received but body has an unexpected shape
- RemoteError: response received and decoded into a problem detail
- RetryExhaustedError: retry budget spent while transient errors persisted
- OperationCancelledError: the caller cancelled the operation
"""

# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from core.types import ErrorCategory


class NakadiError(Exception):
    """
    Base exception for all broker client errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Transport Errors (Transient)
# =============================================================================


class ConnectionError(NakadiError):
    """Transport could not complete the exchange (no response received)."""

    category = ErrorCategory.TRANSIENT


# =============================================================================
# Response Errors
# =============================================================================


class DecodeError(NakadiError):
    """Response received but its body could not be interpreted."""

    category = ErrorCategory.PERMANENT

    def __init__(
        self,
        message: str,
        status_code: int,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, cause, context)
        self.status_code = status_code

    def __str__(self) -> str:
        parts = [f"{self.message} (status {self.status_code})"]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class RemoteError(NakadiError):
    """
    Broker rejected the request with a decodable problem body.

    The category follows the status code, so a 5xx is TRANSIENT and a 4xx is
    PERMANENT (401 is AUTH). Whether a TRANSIENT remote error is actually
    retried is up to the caller's options.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        detail: str,
        problem: object | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, context=context)
        self.status_code = status_code
        self.detail = detail
        self.problem = problem
        self.category = classify_http_status(status_code)


class RetryExhaustedError(NakadiError):
    """Elapsed-time budget spent while transient errors persisted."""

    category = ErrorCategory.TRANSIENT

    def __init__(
        self,
        last_error: NakadiError,
        attempts: int,
        elapsed: float,
        context: dict | None = None,
    ):
        message = f"retry budget exhausted after {attempts} attempts in {elapsed:.1f}s"
        super().__init__(message, cause=last_error, context=context)
        self.last_error = last_error
        self.attempts = attempts
        self.elapsed = elapsed

    @property
    def is_retryable(self) -> bool:
        return False


class OperationCancelledError(NakadiError):
    """The caller signalled cancellation before the operation completed."""

    category = ErrorCategory.CANCELLED


# =============================================================================
# Error Classification Utilities
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code == 401:
        return ErrorCategory.AUTH

    if status_code == 429:
        return ErrorCategory.TRANSIENT  # Rate limited

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def is_transient_error(exc: Exception) -> bool:
    """Check if exception is transient (may succeed on a later attempt)."""
    if isinstance(exc, NakadiError):
        return exc.is_retryable
    return False
