"""
SQLAlchemy ORM Models Package.

- base: Base class and TimestampMixin
- menu: MenuItem (read-only to the order core)
- order: Order, ItemEntry
"""

from .base import Base, TimestampMixin, utcnow
from .menu import MenuItem
from .order import Order, ItemEntry

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "MenuItem",
    "Order",
    "ItemEntry",
]
