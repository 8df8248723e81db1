"""
Shared module for common utilities used by the order core.

STRUCTURE:
- shared.infrastructure: Database and concurrency
  - db.py: SQLAlchemy engine and sessions, safe_commit(), unit_of_work()
  - locks.py: Per-order lock registry
  - correlation.py: Operation IDs for log correlation

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, ItemStatus, limits

- shared.utils: Utilities
  - exceptions.py: Application exceptions with auto-logging
  - validators.py: Input normalization
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db_context, unit_of_work
    from shared.infrastructure.locks import order_locks
    from shared.config.settings import settings
    from shared.config.constants import Roles, ItemStatus
    from shared.utils.exceptions import OrderNotFoundError, OrderPaidError
"""
