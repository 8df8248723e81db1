"""
Item Status Tracker Domain Service.

Owns ItemEntry rows: adds and removes line items of unpaid orders and
advances their preparation status.
"""

from typing import Sequence

from sqlalchemy.orm import Session

from cafe_pos.models import ItemEntry
from cafe_pos.repositories import get_item_entry_repository, get_order_repository
from cafe_pos.services.catalog import MenuCatalog, SqlMenuCatalog
from shared.config.constants import ItemStatus, can_transition_item
from shared.config.logging import tracker_logger as logger
from shared.utils.exceptions import (
    InvalidTransitionError,
    ItemNotInOrderError,
    OrderNotFoundError,
    OrderPaidError,
)


class ItemStatusTracker:
    """
    Domain service for item entries.

    Writes that create or delete entries lock the parent order row first and
    check its paid flag there, so an entry can never slip into a paid order.
    """

    def __init__(self, db: Session, catalog: MenuCatalog | None = None):
        self._db = db
        self._catalog = catalog if catalog is not None else SqlMenuCatalog(db)
        self._orders = get_order_repository(db)
        self._entries = get_item_entry_repository(db)

    def _lock_unpaid(self, order_id: int, action: str) -> None:
        order = self._orders.find_for_update(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.paid:
            raise OrderPaidError(order_id, action=action)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def list_entries(self, order_id: int) -> Sequence[ItemEntry]:
        """Entries of an order in insertion order."""
        return self._entries.list_for_order(order_id)

    def count_by_name(self, order_id: int) -> dict[str, int]:
        """How many times each item name appears in an order."""
        return self._entries.count_by_name(order_id)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def add_item(self, order_id: int, item_name: str, comment: str = "") -> ItemEntry:
        """
        Add one incomplete entry for a menu item.

        The entry's price_cents is the catalog price at this moment; the
        caller adds it to the order total.

        Raises:
            UnknownItemError: If the item is not on the menu
            OrderNotFoundError: If the order does not exist
            OrderPaidError: If the order is already paid
        """
        price_cents = self._catalog.price_of(item_name)
        self._lock_unpaid(order_id, action="add items to")

        entry = ItemEntry(
            order_id=order_id,
            item_name=item_name,
            status=ItemStatus.INCOMPLETE,
            comment=comment or "",
            price_cents=price_cents,
        )
        self._entries.save(entry)

        logger.debug(
            "Item added",
            order_id=order_id,
            entry_id=entry.id,
            item_name=item_name,
            price_cents=price_cents,
        )
        return entry

    def remove_item(self, order_id: int, item_name: str) -> int:
        """
        Remove the most recently added entry of an item.

        Returns the removed entry's price snapshot.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderPaidError: If the order is already paid
            ItemNotInOrderError: If the order has no entry for the item
        """
        self._lock_unpaid(order_id, action="remove items from")

        entry = self._entries.find_latest(order_id, item_name)
        if entry is None:
            raise ItemNotInOrderError(order_id, item_name)

        price_cents = entry.price_cents
        entry_id = entry.id
        self._entries.delete(entry)

        logger.debug(
            "Item removed",
            order_id=order_id,
            entry_id=entry_id,
            item_name=item_name,
            price_cents=price_cents,
        )
        return price_cents

    def set_status(self, order_id: int, new_status: str = ItemStatus.COMPLETED) -> int:
        """
        Move every entry of an order to new_status.

        Works whether or not the order is paid. Returns the number of entries
        changed; an order without pending entries gives 0.

        Raises:
            OrderNotFoundError: If the order does not exist
            InvalidTransitionError: If new_status is not a forward transition
        """
        if not can_transition_item(ItemStatus.INCOMPLETE, new_status):
            raise InvalidTransitionError(
                "item entry", ItemStatus.INCOMPLETE, new_status, order_id=order_id
            )

        if self._orders.find_for_update(order_id) is None:
            raise OrderNotFoundError(order_id)

        changed = self._entries.update_status(order_id, ItemStatus.INCOMPLETE, new_status)

        logger.info(
            "Item statuses advanced",
            order_id=order_id,
            new_status=new_status,
            changed=changed,
        )
        return changed
