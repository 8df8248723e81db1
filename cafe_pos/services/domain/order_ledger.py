"""
Order Ledger Domain Service.

Owns Order rows and guards the total/paid invariants:
- total_cents is never negative and never drifts from the item entries
- a paid order is immutable, and it can be paid only once

The ledger only flushes. Committing (or rolling back) is the job of the
caller's unit of work, so several ledger and tracker calls commit together.
"""

from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy.orm import Session

from cafe_pos.models import Order
from cafe_pos.models.base import utcnow
from cafe_pos.repositories import get_item_entry_repository, get_order_repository
from shared.config.constants import Limits
from shared.config.logging import ledger_logger as logger, mask_login
from shared.config.settings import settings
from shared.utils.exceptions import (
    AlreadyPaidError,
    InvariantViolationError,
    OrderNotFoundError,
    OrderPaidError,
)


class OrderLedger:
    """
    Domain service for Order rows.

    Every mutating method re-reads the order under a row lock and checks the
    paid flag as part of its own write, so a check made earlier by a caller
    cannot go stale between the check and the write.
    """

    def __init__(self, db: Session):
        self._db = db
        self._orders = get_order_repository(db)
        self._entries = get_item_entry_repository(db)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_order(self, order_id: int) -> Order:
        """
        Get an order by id.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        order = self._orders.find_by_id(order_id, fresh=True)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def lock_order(self, order_id: int) -> Order:
        """
        Get an order under a row lock, freshly read.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        order = self._orders.find_for_update(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def lock_unpaid_order(self, order_id: int, action: str = "modify") -> Order:
        """
        Get an order under a row lock and require it to be unpaid.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderPaidError: If the order is already paid
        """
        order = self.lock_order(order_id)
        if order.paid:
            raise OrderPaidError(order_id, action=action)
        return order

    def order_history(self, owner_login: str, limit: int | None = None) -> Sequence[Order]:
        """Most recent orders of an owner, newest first."""
        limit = limit or settings.order_history_limit
        limit = min(max(1, limit), Limits.MAX_ORDER_HISTORY)
        return self._orders.find_by_owner(owner_login, limit)

    def open_orders(self, since: datetime | None = None) -> Sequence[Order]:
        """Unpaid orders placed since `since` (default: the configured window)."""
        if since is None:
            since = utcnow() - timedelta(hours=settings.open_orders_window_hours)
        return self._orders.find_unpaid_since(since)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create_order(self, owner_login: str) -> Order:
        """
        Insert a new unpaid order with a zero total.

        The returned order carries its assigned id.
        """
        order = Order(owner_login=owner_login, paid=False, total_cents=0)
        self._orders.save(order)

        logger.info("Order created", order_id=order.id, owner=mask_login(owner_login))
        return order

    def adjust_total(self, order_id: int, delta_cents: int) -> Order:
        """
        Add delta_cents (negative for removals) to the order total.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderPaidError: If the order is already paid
            InvariantViolationError: If the total would become negative
        """
        order = self.lock_unpaid_order(order_id, action="change the total of")

        new_total = order.total_cents + delta_cents
        if new_total < 0:
            raise InvariantViolationError(
                f"total of order {order_id} would become negative",
                order_id=order_id,
                total_cents=order.total_cents,
                delta_cents=delta_cents,
            )

        order.total_cents = new_total
        order.updated_at = utcnow()
        self._db.flush()

        logger.debug(
            "Order total adjusted",
            order_id=order_id,
            delta_cents=delta_cents,
            total_cents=new_total,
        )
        return order

    def mark_paid(self, order_id: int) -> Order:
        """
        Settle an order. One-way: there is no un-pay.

        Raises:
            OrderNotFoundError: If the order does not exist
            AlreadyPaidError: If the order was already paid
        """
        order = self.lock_order(order_id)
        if order.paid:
            raise AlreadyPaidError(order_id)

        order.paid = True
        order.paid_at = utcnow()
        self._db.flush()

        logger.info("Order paid", order_id=order_id, total_cents=order.total_cents)
        return order

    def delete_order(self, order_id: int) -> int:
        """
        Delete an unpaid order together with all of its item entries.

        Returns the number of item entries removed with it.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderPaidError: If the order is already paid
        """
        order = self.lock_unpaid_order(order_id, action="cancel")

        entries_removed = self._entries.count_for_order(order_id)
        self._orders.delete(order)

        logger.info("Order deleted", order_id=order_id, entries_removed=entries_removed)
        return entries_removed

    # =========================================================================
    # Consistency
    # =========================================================================

    def verify_total(self, order_id: int) -> Order:
        """
        Check that the stored total equals the sum of the entries' prices.

        Raises:
            OrderNotFoundError: If the order does not exist
            InvariantViolationError: If the two differ
        """
        order = self.lock_order(order_id)
        expected = self._entries.sum_prices(order_id)
        if order.total_cents != expected:
            raise InvariantViolationError(
                f"total of order {order_id} drifted from its items",
                order_id=order_id,
                total_cents=order.total_cents,
                items_sum_cents=expected,
            )
        return order
