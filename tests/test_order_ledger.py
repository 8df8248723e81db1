"""
Tests for OrderLedger domain service.
"""

import pytest
from datetime import timedelta
from sqlalchemy import select, func, update

from cafe_pos.models import Order, ItemEntry
from cafe_pos.models.base import utcnow
from cafe_pos.services.domain import OrderLedger, ItemStatusTracker
from shared.utils.exceptions import (
    AlreadyPaidError,
    InvariantViolationError,
    OrderNotFoundError,
    OrderPaidError,
)


class TestOrderLedgerCreate:
    """Tests for order creation and lookup."""

    def test_create_order_starts_unpaid_with_zero_total(self, db_session):
        """Should insert an unpaid order with a zero total."""
        ledger = OrderLedger(db_session)

        order = ledger.create_order("alice")
        db_session.commit()

        assert order.id is not None
        assert order.owner_login == "alice"
        assert order.paid is False
        assert order.paid_at is None
        assert order.total_cents == 0
        assert order.state == "OPEN"

    def test_create_order_assigns_increasing_ids(self, db_session):
        """Should assign monotonically increasing ids."""
        ledger = OrderLedger(db_session)

        first = ledger.create_order("alice")
        second = ledger.create_order("alice")

        assert second.id > first.id

    def test_get_order_returns_existing_order(self, db_session):
        """Should return the order by id."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        db_session.commit()

        found = ledger.get_order(order.id)

        assert found.id == order.id
        assert found.owner_login == "alice"

    def test_get_order_raises_for_unknown_id(self, db_session):
        """Should raise OrderNotFoundError for an unknown id."""
        ledger = OrderLedger(db_session)

        with pytest.raises(OrderNotFoundError) as exc_info:
            ledger.get_order(999)

        assert exc_info.value.status_code == 404
        assert exc_info.value.order_id == 999


class TestOrderLedgerAdjustTotal:
    """Tests for total adjustments."""

    def test_adjust_total_adds_delta(self, db_session):
        """Should add a positive delta to the total."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")

        updated = ledger.adjust_total(order.id, 550)

        assert updated.total_cents == 550

    def test_adjust_total_subtracts_negative_delta(self, db_session):
        """Should subtract a negative delta from the total."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        ledger.adjust_total(order.id, 550)

        updated = ledger.adjust_total(order.id, -250)

        assert updated.total_cents == 300

    def test_adjust_total_to_exactly_zero_is_allowed(self, db_session):
        """Should allow the total to reach zero."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        ledger.adjust_total(order.id, 300)

        updated = ledger.adjust_total(order.id, -300)

        assert updated.total_cents == 0

    def test_adjust_total_rejects_negative_result(self, db_session):
        """Should raise InvariantViolationError instead of clamping."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        ledger.adjust_total(order.id, 300)

        with pytest.raises(InvariantViolationError) as exc_info:
            ledger.adjust_total(order.id, -301)

        assert exc_info.value.status_code == 500
        assert ledger.get_order(order.id).total_cents == 300

    def test_adjust_total_rejects_paid_order(self, db_session):
        """Should raise OrderPaidError when the order is paid."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        ledger.adjust_total(order.id, 300)
        ledger.mark_paid(order.id)

        with pytest.raises(OrderPaidError):
            ledger.adjust_total(order.id, 100)

        assert ledger.get_order(order.id).total_cents == 300

    def test_adjust_total_raises_for_unknown_order(self, db_session):
        """Should raise OrderNotFoundError for an unknown order."""
        ledger = OrderLedger(db_session)

        with pytest.raises(OrderNotFoundError):
            ledger.adjust_total(42, 100)


class TestOrderLedgerMarkPaid:
    """Tests for settling orders."""

    def test_mark_paid_sets_flag_and_timestamp(self, db_session):
        """Should flip paid and stamp paid_at."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")

        paid = ledger.mark_paid(order.id)

        assert paid.paid is True
        assert paid.paid_at is not None
        assert paid.state == "PAID"

    def test_mark_paid_twice_raises_and_keeps_state(self, db_session):
        """Should raise AlreadyPaidError on the second call, state unchanged."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        ledger.adjust_total(order.id, 425)
        ledger.mark_paid(order.id)
        db_session.commit()
        paid_at = ledger.get_order(order.id).paid_at

        with pytest.raises(AlreadyPaidError) as exc_info:
            ledger.mark_paid(order.id)

        assert exc_info.value.status_code == 409
        again = ledger.get_order(order.id)
        assert again.paid is True
        assert again.paid_at == paid_at
        assert again.total_cents == 425

    def test_mark_paid_raises_for_unknown_order(self, db_session):
        """Should raise OrderNotFoundError for an unknown order."""
        ledger = OrderLedger(db_session)

        with pytest.raises(OrderNotFoundError):
            ledger.mark_paid(7)


class TestOrderLedgerDelete:
    """Tests for order deletion."""

    def test_delete_order_cascades_to_entries(self, db_session, seed_menu):
        """Should remove the order and all of its item entries."""
        ledger = OrderLedger(db_session)
        tracker = ItemStatusTracker(db_session)
        order = ledger.create_order("alice")
        tracker.add_item(order.id, "Coffee")
        tracker.add_item(order.id, "Muffin", "warm")
        db_session.commit()

        removed = ledger.delete_order(order.id)
        db_session.commit()

        assert removed == 2
        assert db_session.scalar(select(func.count()).select_from(Order)) == 0
        assert db_session.scalar(select(func.count()).select_from(ItemEntry)) == 0

    def test_delete_order_without_entries_returns_zero(self, db_session):
        """Should return 0 when the order has no entries."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")

        assert ledger.delete_order(order.id) == 0

    def test_delete_order_rejects_paid_order(self, db_session):
        """Should raise OrderPaidError and keep a paid order."""
        ledger = OrderLedger(db_session)
        order = ledger.create_order("alice")
        ledger.mark_paid(order.id)

        with pytest.raises(OrderPaidError):
            ledger.delete_order(order.id)

        assert ledger.get_order(order.id).paid is True

    def test_delete_order_raises_for_unknown_order(self, db_session):
        """Should raise OrderNotFoundError for an unknown order."""
        ledger = OrderLedger(db_session)

        with pytest.raises(OrderNotFoundError):
            ledger.delete_order(123)


class TestOrderLedgerVerifyTotal:
    """Tests for the total consistency check."""

    def test_verify_total_passes_when_consistent(self, db_session, seed_menu):
        """Should return the order when total matches the entries."""
        ledger = OrderLedger(db_session)
        tracker = ItemStatusTracker(db_session)
        order = ledger.create_order("alice")
        entry = tracker.add_item(order.id, "Latte")
        ledger.adjust_total(order.id, entry.price_cents)

        assert ledger.verify_total(order.id).total_cents == 425

    def test_verify_total_detects_drift(self, db_session, seed_menu):
        """Should raise InvariantViolationError when the total drifted."""
        ledger = OrderLedger(db_session)
        tracker = ItemStatusTracker(db_session)
        order = ledger.create_order("alice")
        tracker.add_item(order.id, "Latte")
        db_session.execute(
            update(Order).where(Order.id == order.id).values(total_cents=1)
        )

        with pytest.raises(InvariantViolationError):
            ledger.verify_total(order.id)


class TestOrderLedgerQueries:
    """Tests for history and open order queries."""

    def test_order_history_returns_newest_first(self, db_session):
        """Should list the owner's orders newest first, limited."""
        ledger = OrderLedger(db_session)
        ids = [ledger.create_order("alice").id for _ in range(4)]
        ledger.create_order("bob")
        db_session.commit()

        history = ledger.order_history("alice", limit=3)

        assert [o.id for o in history] == list(reversed(ids))[:3]
        assert all(o.owner_login == "alice" for o in history)

    def test_order_history_uses_default_limit(self, db_session):
        """Should apply the configured default limit of 5."""
        ledger = OrderLedger(db_session)
        for _ in range(7):
            ledger.create_order("alice")

        assert len(ledger.order_history("alice")) == 5

    def test_open_orders_excludes_paid_and_old_orders(self, db_session):
        """Should list only unpaid orders inside the window, oldest first."""
        ledger = OrderLedger(db_session)
        recent_a = ledger.create_order("alice")
        recent_b = ledger.create_order("bob")
        paid = ledger.create_order("alice")
        ledger.mark_paid(paid.id)
        old = ledger.create_order("alice")
        old.created_at = utcnow() - timedelta(days=2)
        db_session.commit()

        open_ids = [o.id for o in ledger.open_orders()]

        assert open_ids == [recent_a.id, recent_b.id]

    def test_open_orders_accepts_explicit_since(self, db_session):
        """Should honor an explicit lower bound."""
        ledger = OrderLedger(db_session)
        old = ledger.create_order("alice")
        old.created_at = utcnow() - timedelta(days=2)
        db_session.commit()

        open_ids = [o.id for o in ledger.open_orders(since=utcnow() - timedelta(days=3))]

        assert open_ids == [old.id]
