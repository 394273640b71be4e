"""Request context helpers using ContextVars.

Values set here are picked up by ``log_event`` so adapters deep in the
pipeline don't have to thread request identifiers through every call.
"""

from contextvars import ContextVar
from typing import Optional


# Public ContextVars (names are stable API)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
message_sid_var: ContextVar[Optional[str]] = ContextVar("message_sid", default=None)
from_var: ContextVar[Optional[str]] = ContextVar("from_number", default=None)
route_var: ContextVar[Optional[str]] = ContextVar("award_route", default=None)


def clear_context() -> None:
    """Reset context variables to defaults."""
    request_id_var.set(None)
    message_sid_var.set(None)
    from_var.set(None)
    route_var.set(None)
