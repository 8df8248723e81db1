"""
Per-order mutual exclusion.

Calls that mutate the same order run one at a time inside this process;
calls on different orders never contend. Inside the lock the ledger also
takes a row lock (SELECT ... FOR UPDATE) so separate processes sharing a
PostgreSQL database serialize as well.

Usage:
    from shared.infrastructure.locks import order_locks

    with order_locks.hold(order_id):
        ...
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import StorageUnavailableError

logger = get_logger(__name__)


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        # Threads holding or waiting on the lock; entry is dropped at zero
        self.holders = 0


class OrderLockRegistry:
    """
    Registry of one lock per order id.

    Entries are reference counted and removed once no thread holds or
    waits on them, so the registry does not grow with the order count.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout
        self._entries: dict[int, _Entry] = {}
        self._registry_lock = threading.Lock()

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return settings.order_lock_timeout_seconds

    def _checkout(self, order_id: int) -> _Entry:
        with self._registry_lock:
            entry = self._entries.get(order_id)
            if entry is None:
                entry = _Entry()
                self._entries[order_id] = entry
            entry.holders += 1
            return entry

    def _release(self, order_id: int, entry: _Entry) -> None:
        with self._registry_lock:
            entry.holders -= 1
            if entry.holders == 0:
                self._entries.pop(order_id, None)

    @contextmanager
    def hold(self, order_id: int, timeout: float | None = None) -> Iterator[None]:
        """
        Hold the lock of one order for the duration of the block.

        Raises:
            StorageUnavailableError: If the lock is not acquired in time
        """
        wait = self.timeout if timeout is None else timeout
        entry = self._checkout(order_id)
        try:
            if not entry.lock.acquire(timeout=wait):
                raise StorageUnavailableError(
                    f"order {order_id} is busy",
                    order_id=order_id,
                    waited_seconds=wait,
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._release(order_id, entry)

    def is_held(self, order_id: int) -> bool:
        """Check whether some thread currently holds the order's lock."""
        with self._registry_lock:
            entry = self._entries.get(order_id)
            return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._entries)


# Process-wide registry used by the order services
order_locks = OrderLockRegistry()
