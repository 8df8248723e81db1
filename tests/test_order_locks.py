"""
Tests for the per-order lock registry.
"""

import threading

import pytest

from shared.infrastructure.locks import OrderLockRegistry
from shared.utils.exceptions import StorageUnavailableError


class TestOrderLockRegistry:
    """Tests for per-order mutual exclusion."""

    def test_hold_marks_order_as_held(self):
        """Should report the order as held only inside the block."""
        registry = OrderLockRegistry(timeout=1.0)

        with registry.hold(1):
            assert registry.is_held(1) is True
            assert registry.is_held(2) is False

        assert registry.is_held(1) is False

    def test_entries_are_dropped_after_release(self):
        """Should not keep entries for orders nobody holds."""
        registry = OrderLockRegistry(timeout=1.0)

        with registry.hold(1), registry.hold(2):
            assert len(registry) == 2

        assert len(registry) == 0

    def test_entry_is_dropped_after_error(self):
        """Should release the lock when the block raises."""
        registry = OrderLockRegistry(timeout=1.0)

        with pytest.raises(RuntimeError):
            with registry.hold(5):
                raise RuntimeError("boom")

        assert registry.is_held(5) is False
        assert len(registry) == 0

    def test_timeout_raises_storage_unavailable(self):
        """Should fail fast when the lock is not acquired in time."""
        registry = OrderLockRegistry(timeout=0.05)

        with registry.hold(7):
            with pytest.raises(StorageUnavailableError) as exc_info:
                with registry.hold(7):
                    pass

        assert exc_info.value.status_code == 503
        assert exc_info.value.headers == {"Retry-After": "1"}
        assert len(registry) == 0

    def test_different_orders_do_not_contend(self):
        """Should let another thread lock a different order immediately."""
        registry = OrderLockRegistry(timeout=0.5)
        acquired = threading.Event()

        def other_order():
            with registry.hold(2, timeout=0.1):
                acquired.set()

        with registry.hold(1):
            thread = threading.Thread(target=other_order)
            thread.start()
            thread.join(timeout=5)

        assert acquired.is_set()

    def test_same_order_waits_for_release(self):
        """Should serialize two threads on the same order."""
        registry = OrderLockRegistry(timeout=5.0)
        events: list[str] = []
        first_inside = threading.Event()
        release_first = threading.Event()

        def first():
            with registry.hold(3):
                events.append("first-in")
                first_inside.set()
                release_first.wait(timeout=5)
                events.append("first-out")

        def second():
            first_inside.wait(timeout=5)
            with registry.hold(3):
                events.append("second-in")

        threads = [threading.Thread(target=first), threading.Thread(target=second)]
        for thread in threads:
            thread.start()
        first_inside.wait(timeout=5)
        release_first.set()
        for thread in threads:
            thread.join(timeout=5)

        assert events == ["first-in", "first-out", "second-in"]
