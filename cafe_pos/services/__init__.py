"""
Services module for business logic.

- domain/: Order ledger, item status tracker and the order service - USE THESE
- catalog/: Menu price lookup
- permissions/: Actor identity and role checks

Usage:
    from cafe_pos.services.domain import OrderService
    from cafe_pos.services.permissions import Actor

    service = OrderService(db)
    service.place_order(Actor.customer("alice"), [("Coffee", "")])
"""

from .catalog import MenuCatalog, SqlMenuCatalog
from .permissions import Actor
from .domain import OrderLedger, ItemStatusTracker, OrderService

__all__ = [
    "MenuCatalog",
    "SqlMenuCatalog",
    "Actor",
    "OrderLedger",
    "ItemStatusTracker",
    "OrderService",
]
