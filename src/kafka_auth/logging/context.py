"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_client_id: ContextVar[str] = ContextVar("client_id", default="")
_component: ContextVar[str] = ContextVar("component", default="")


def set_log_context(
    client_id: Optional[str] = None,
    component: Optional[str] = None,
) -> None:
    if client_id is not None:
        _client_id.set(client_id)
    if component is not None:
        _component.set(component)


def get_log_context() -> Dict[str, str]:
    return {
        "client_id": _client_id.get(),
        "component": _component.get(),
    }


def clear_log_context() -> None:
    _client_id.set("")
    _component.set("")
