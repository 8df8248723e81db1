"""
Operation correlation for logging.

Each order operation runs under an operation id so every log line it emits
(ledger, tracker, engine, exceptions) can be grouped together.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Context variable for operation ID (thread-safe)
operation_id_var: ContextVar[str] = ContextVar("operation_id", default="")


def get_operation_id() -> str:
    """Get the current operation ID."""
    return operation_id_var.get()


@contextmanager
def operation_scope(operation_id: str | None = None) -> Iterator[str]:
    """
    Bind an operation ID for the duration of the block.

    Nested scopes keep the outer ID so a composite operation logs
    under a single identifier.

    Usage:
        with operation_scope() as op_id:
            service.place_order(...)
    """
    current = operation_id_var.get()
    if current and operation_id is None:
        yield current
        return

    token = operation_id_var.set(operation_id or str(uuid.uuid4()))
    try:
        yield operation_id_var.get()
    finally:
        operation_id_var.reset(token)


class CorrelationIdFilter:
    """
    Logging filter that adds operation_id to log records.

    Usage:
        import logging
        handler = logging.StreamHandler()
        handler.addFilter(CorrelationIdFilter())
    """

    def filter(self, record) -> bool:
        record.operation_id = operation_id_var.get() or "-"
        return True
