"""
Infrastructure module: Database, per-order locks and log correlation.

Provides:
- Database sessions and transactions (db.py)
- Per-order mutual exclusion (locks.py)
- Operation ids for log correlation (correlation.py)
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    build_engine,
    get_db_context,
    safe_commit,
    unit_of_work,
)
from shared.infrastructure.locks import OrderLockRegistry, order_locks
from shared.infrastructure.correlation import (
    get_operation_id,
    operation_scope,
    CorrelationIdFilter,
)

__all__ = [
    # db
    "engine",
    "SessionLocal",
    "build_engine",
    "get_db_context",
    "safe_commit",
    "unit_of_work",
    # locks
    "OrderLockRegistry",
    "order_locks",
    # correlation
    "get_operation_id",
    "operation_scope",
    "CorrelationIdFilter",
]
