"""Shared JSON serialization utilities for type-safe JSON encoding."""

from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Path):
        return True, str(obj)
    if isinstance(obj, Enum):
        return True, obj.value
    if isinstance(obj, BaseModel):
        return True, obj.model_dump(mode="json", exclude_none=True)
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    Type-safe JSON serializer for log records and CLI output.

    - datetime/date -> ISO 8601 string
    - Path -> string
    - Enums -> value
    - pydantic models -> JSON-compatible dict
    - Everything else -> string (fallback)

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation with proper types
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    return str(obj)


__all__ = ["json_serializer"]
