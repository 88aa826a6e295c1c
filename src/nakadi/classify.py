"""
Classification of completed attempts.

An attempt ends in one of four ways:
- the transport raised before any response -> ConnectionError
- expected status and a body of the expected shape -> decoded payload
- body that cannot be decoded for its status -> DecodeError
- failure status with a problem body -> RemoteError
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from core.errors.exceptions import ConnectionError, DecodeError, RemoteError
from nakadi.problem import DECODE_ERROR_MESSAGE, decode_problem
from nakadi.transport import HttpResponse

M = TypeVar("M", bound=BaseModel)


def classify_transport_error(exc: BaseException, action: str, url: str) -> ConnectionError:
    """Wrap a transport failure so the retry loop can recognise it."""
    return ConnectionError(
        f"unable to {action}",
        cause=exc,
        context={"api_url": url, "error_type": type(exc).__name__},
    )


def decode_body(model: type[M], status_code: int, body: bytes) -> M:
    """Decode a success body into ``model``, raising DecodeError on mismatch."""
    if not body or not body.strip():
        raise DecodeError(DECODE_ERROR_MESSAGE, status_code=status_code)
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(DECODE_ERROR_MESSAGE, status_code=status_code, cause=e) from e


def classify_response(
    response: HttpResponse,
    *,
    expected: tuple[int, ...],
    model: type[M] | None,
    action: str,
) -> M | None:
    """
    Turn a received response into a payload or a classified error.

    Args:
        response: Status, headers and body of the attempt
        expected: Status codes that count as success for this operation
        model: Payload model, or None when success carries no body
        action: Verb phrase used in error messages ("create subscription")

    Returns:
        Decoded payload, or None when ``model`` is None

    Raises:
        DecodeError: Body could not be interpreted for its status
        RemoteError: Failure status with a decodable problem body
    """
    if response.status in expected:
        if model is None:
            return None
        return decode_body(model, response.status, response.body)

    problem = decode_problem(response.status, response.body)
    raise RemoteError(
        f"unable to {action}: {problem.detail}",
        status_code=response.status,
        detail=problem.detail,
        problem=problem,
    )
