"""Decoding of problem bodies returned with non-success responses."""

from pydantic import BaseModel, ConfigDict, ValidationError

from core.errors.exceptions import DecodeError

DECODE_ERROR_MESSAGE = "unable to decode response body"


class ProblemDetail(BaseModel):
    """Problem body. Only ``detail`` is required."""

    model_config = ConfigDict(extra="ignore")

    detail: str
    title: str | None = None
    status: int | None = None
    type: str | None = None
    instance: str | None = None


def decode_problem(status_code: int, body: bytes) -> ProblemDetail:
    """
    Parse a failure response body into a ProblemDetail.

    Args:
        status_code: HTTP status of the failed response
        body: Raw response body, possibly empty

    Returns:
        Decoded ProblemDetail

    Raises:
        DecodeError: Body is empty or not shaped like a problem
    """
    if not body or not body.strip():
        raise DecodeError(DECODE_ERROR_MESSAGE, status_code=status_code)
    try:
        return ProblemDetail.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(DECODE_ERROR_MESSAGE, status_code=status_code, cause=e) from e
