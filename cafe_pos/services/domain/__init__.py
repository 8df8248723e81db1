"""
Domain Services - order core business logic.

Structure:
    OrderService (orchestration, one unit of work per call)
        ↓
    OrderLedger / ItemStatusTracker (invariants per table)
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from cafe_pos.services.domain import OrderService

    service = OrderService(db)
    order_id = service.place_order(actor, [("Coffee", "")])
"""

from .order_ledger import OrderLedger
from .item_status_tracker import ItemStatusTracker
from .order_service import OrderService

__all__ = [
    "OrderLedger",
    "ItemStatusTracker",
    "OrderService",
]
