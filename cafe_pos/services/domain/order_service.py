"""
Order Mutation Engine.

Orchestrates the ledger and the tracker into atomic order operations:
place, add, remove, settle, cancel and advance fulfillment.

Each mutating call runs as one unit of work: the per-order lock is held
for the whole call and all rows are written in a single transaction, which
is rolled back on any failure. A call that fails leaves the order exactly
as it was.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from cafe_pos.services.catalog import MenuCatalog, SqlMenuCatalog
from cafe_pos.services.domain.item_status_tracker import ItemStatusTracker
from cafe_pos.services.domain.order_ledger import OrderLedger
from cafe_pos.services.permissions import Actor
from shared.config.constants import Limits
from shared.config.logging import engine_logger as logger, mask_login
from shared.infrastructure.correlation import operation_scope
from shared.infrastructure.db import unit_of_work
from shared.infrastructure.locks import OrderLockRegistry, order_locks
from shared.utils.exceptions import ItemNotInOrderError, OrderPaidError, ValidationError
from shared.utils.schemas import (
    ItemEntryOutput,
    OrderItemInput,
    OrderOutput,
    OrderStatusOutput,
)
from shared.utils.validators import normalize_item_name

# Accepted shapes for one requested item
ItemRequest = OrderItemInput | tuple[str, str] | str


class OrderService:
    """
    Domain service for order operations.

    Usage:
        service = OrderService(db)
        order_id = service.place_order(actor, [("Coffee", ""), ("Muffin", "warm")])
        service.settle_order(order_id, actor)
    """

    def __init__(
        self,
        db: Session,
        catalog: MenuCatalog | None = None,
        locks: OrderLockRegistry | None = None,
    ):
        self._db = db
        self._catalog = catalog if catalog is not None else SqlMenuCatalog(db)
        self._locks = locks if locks is not None else order_locks
        self._ledger = OrderLedger(db)
        self._tracker = ItemStatusTracker(db, self._catalog)

    # =========================================================================
    # Input normalization
    # =========================================================================

    def _normalize_items(self, items: Iterable[ItemRequest]) -> list[OrderItemInput]:
        """
        Coerce requested items into validated OrderItemInput values.

        Raises:
            ValidationError: If the list is empty, too long, or an item is malformed
        """
        normalized: list[OrderItemInput] = []
        for position, item in enumerate(items):
            try:
                if isinstance(item, OrderItemInput):
                    normalized.append(item)
                elif isinstance(item, str):
                    normalized.append(OrderItemInput(name=item))
                else:
                    name, comment = item
                    normalized.append(OrderItemInput(name=name, comment=comment))
            except PydanticValidationError as e:
                raise ValidationError(
                    f"Invalid item at position {position}",
                    field="items",
                    position=position,
                    errors=[err["msg"] for err in e.errors()],
                ) from e
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid item at position {position}",
                    field="items",
                    position=position,
                ) from e

        self._check_batch_size(len(normalized))
        return normalized

    def _normalize_names(self, item_names: Iterable[str]) -> list[str]:
        """
        Raises:
            ValidationError: If the list is empty, too long, or a name is malformed
        """
        names: list[str] = []
        for position, name in enumerate(item_names):
            try:
                names.append(normalize_item_name(name))
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid item name at position {position}",
                    field="item_names",
                    position=position,
                ) from e

        self._check_batch_size(len(names))
        return names

    @staticmethod
    def _check_batch_size(count: int) -> None:
        if count == 0:
            raise ValidationError("At least one item is required", field="items")
        if count > Limits.MAX_ITEMS_PER_CALL:
            raise ValidationError(
                f"At most {Limits.MAX_ITEMS_PER_CALL} items per call",
                field="items",
                count=count,
            )

    # =========================================================================
    # Mutations
    # =========================================================================

    def place_order(
        self,
        actor: Actor,
        items: Sequence[ItemRequest],
        pay_now: bool = False,
    ) -> int:
        """
        Create an order with the given items, optionally paying it at once.

        Every item is checked against the menu before anything is written,
        so an unknown item leaves no order row behind.

        Returns:
            The new order id

        Raises:
            ValidationError: If the item list is empty or malformed
            UnknownItemError: For the first item not on the menu
        """
        requested = self._normalize_items(items)

        with operation_scope():
            self._catalog.prices_of([item.name for item in requested])

            with unit_of_work(self._db):
                order = self._ledger.create_order(actor.login)
                total_cents = 0
                for item in requested:
                    entry = self._tracker.add_item(order.id, item.name, item.comment)
                    total_cents += entry.price_cents

                self._ledger.adjust_total(order.id, total_cents)
                self._ledger.verify_total(order.id)

                if pay_now:
                    self._ledger.mark_paid(order.id)

                order_id = order.id

            logger.info(
                "Order placed",
                order_id=order_id,
                owner=mask_login(actor.login),
                items_count=len(requested),
                total_cents=total_cents,
                paid=pay_now,
            )
            return order_id

    def add_items_to_order(
        self,
        order_id: int,
        actor: Actor,
        items: Sequence[ItemRequest],
    ) -> OrderOutput:
        """
        Append items to an unpaid order.

        Raises:
            ValidationError: If the item list is empty or malformed
            OrderNotFoundError: If the order does not exist
            NotOrderOwnerError: If a customer targets another user's order
            OrderPaidError: If the order is already paid
            UnknownItemError: For the first item not on the menu
        """
        requested = self._normalize_items(items)

        with operation_scope(), self._locks.hold(order_id), unit_of_work(self._db):
            order = self._ledger.lock_order(order_id)
            actor.require_access(order_id, order.owner_login)
            if order.paid:
                raise OrderPaidError(order_id, action="add items to")

            self._catalog.prices_of([item.name for item in requested])

            added_cents = 0
            for item in requested:
                entry = self._tracker.add_item(order_id, item.name, item.comment)
                added_cents += entry.price_cents

            self._ledger.adjust_total(order_id, added_cents)
            order = self._ledger.verify_total(order_id)

            logger.info(
                "Items added to order",
                order_id=order_id,
                items_count=len(requested),
                added_cents=added_cents,
                total_cents=order.total_cents,
            )
            return OrderOutput.model_validate(order)

    def remove_items_from_order(
        self,
        order_id: int,
        actor: Actor,
        item_names: Sequence[str],
    ) -> OrderOutput:
        """
        Remove items from an unpaid order.

        All requested items, counted with multiplicity, must be present
        before any is removed. For an item that appears several times the
        most recently added entry goes first.

        Raises:
            ValidationError: If the name list is empty or malformed
            OrderNotFoundError: If the order does not exist
            NotOrderOwnerError: If a customer targets another user's order
            OrderPaidError: If the order is already paid
            ItemNotInOrderError: If the order holds fewer entries than requested
        """
        names = self._normalize_names(item_names)

        with operation_scope(), self._locks.hold(order_id), unit_of_work(self._db):
            order = self._ledger.lock_order(order_id)
            actor.require_access(order_id, order.owner_login)
            if order.paid:
                raise OrderPaidError(order_id, action="remove items from")

            present = self._tracker.count_by_name(order_id)
            for name, wanted in Counter(names).items():
                if present.get(name, 0) < wanted:
                    raise ItemNotInOrderError(
                        order_id,
                        name,
                        requested=wanted,
                        present=present.get(name, 0),
                    )

            removed_cents = 0
            for name in names:
                removed_cents += self._tracker.remove_item(order_id, name)

            self._ledger.adjust_total(order_id, -removed_cents)
            order = self._ledger.verify_total(order_id)

            logger.info(
                "Items removed from order",
                order_id=order_id,
                items_count=len(names),
                removed_cents=removed_cents,
                total_cents=order.total_cents,
            )
            return OrderOutput.model_validate(order)

    def settle_order(self, order_id: int, actor: Actor) -> OrderOutput:
        """
        Mark an order as paid. The only way into the PAID state.

        Raises:
            OrderNotFoundError: If the order does not exist
            NotOrderOwnerError: If a customer targets another user's order
            AlreadyPaidError: If the order was already paid
        """
        with operation_scope(), self._locks.hold(order_id), unit_of_work(self._db):
            order = self._ledger.lock_order(order_id)
            actor.require_access(order_id, order.owner_login)

            self._ledger.verify_total(order_id)
            order = self._ledger.mark_paid(order_id)

            logger.info(
                "Order settled",
                order_id=order_id,
                by=mask_login(actor.login),
                total_cents=order.total_cents,
            )
            return OrderOutput.model_validate(order)

    def cancel_order(self, order_id: int, actor: Actor) -> None:
        """
        Delete an unpaid order with all of its items.

        Raises:
            OrderNotFoundError: If the order does not exist
            NotOrderOwnerError: If a customer targets another user's order
            OrderPaidError: If the order is already paid
        """
        with operation_scope(), self._locks.hold(order_id), unit_of_work(self._db):
            order = self._ledger.lock_order(order_id)
            actor.require_access(order_id, order.owner_login)

            entries_removed = self._ledger.delete_order(order_id)

        logger.info(
            "Order cancelled",
            order_id=order_id,
            by=mask_login(actor.login),
            entries_removed=entries_removed,
        )

    def advance_fulfillment(self, order_id: int, actor: Actor) -> int:
        """
        Mark every item of an order as completed. Staff only.

        Allowed whether or not the order is paid.

        Returns:
            Number of entries that changed status

        Raises:
            InsufficientRoleError: If the actor is not staff
            OrderNotFoundError: If the order does not exist
        """
        actor.require_staff()

        with operation_scope(), self._locks.hold(order_id), unit_of_work(self._db):
            changed = self._tracker.set_status(order_id)

        logger.info(
            "Fulfillment advanced",
            order_id=order_id,
            by=mask_login(actor.login),
            changed=changed,
        )
        return changed

    # =========================================================================
    # Queries
    # =========================================================================

    def get_order_status(self, order_id: int, actor: Actor) -> OrderStatusOutput:
        """
        The order with its item entries in insertion order.

        Raises:
            OrderNotFoundError: If the order does not exist
            NotOrderOwnerError: If a customer targets another user's order
        """
        order = self._ledger.get_order(order_id)
        actor.require_access(order_id, order.owner_login)

        entries = self._tracker.list_entries(order_id)
        return OrderStatusOutput(
            order=OrderOutput.model_validate(order),
            items=[ItemEntryOutput.model_validate(e) for e in entries],
        )

    def order_history(self, actor: Actor, limit: int | None = None) -> list[OrderOutput]:
        """The actor's own most recent orders, newest first."""
        orders = self._ledger.order_history(actor.login, limit)
        return [OrderOutput.model_validate(o) for o in orders]

    def open_orders(self, actor: Actor, since: datetime | None = None) -> list[OrderOutput]:
        """
        Unpaid orders of the current window, oldest first. Staff only.

        Raises:
            InsufficientRoleError: If the actor is not staff
        """
        actor.require_staff()
        orders = self._ledger.open_orders(since)
        return [OrderOutput.model_validate(o) for o in orders]
