"""
Request correlation IDs.

A short ID is attached to every request so that log lines, error payloads
and Sentry events for the same request can be matched up.
"""

import uuid
from contextvars import ContextVar

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short correlation ID.

    Returns:
        8 lowercase hex characters, short enough to read out over the phone.
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the correlation ID of the current request, or "" outside one."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current request context."""
    correlation_id_var.set(correlation_id)
