"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_component: ContextVar[str] = ContextVar("component", default="")


def set_log_context(component: Optional[str] = None) -> None:
    if component is not None:
        _component.set(component)


def get_log_context() -> Dict[str, str]:
    return {"component": _component.get()}


def clear_log_context() -> None:
    _component.set("")
