"""
Order Repository - Data access for order headers.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence
from sqlalchemy.orm import Session
from sqlalchemy import Select, select

from cafe_pos.models import Order
from .base import BaseRepository, RepositoryFilters


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    owner_login: str | None = None
    paid: bool | None = None
    created_since: datetime | None = None


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Mutations go through find_for_update(), which takes the row lock and
    reloads the row so a check made on it reflects the committed state.
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        # Newest first; ids are monotonic
        return select(Order).order_by(Order.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply order-specific filters."""
        if not isinstance(filters, OrderFilters):
            filters = OrderFilters(**filters.__dict__)

        if filters.owner_login is not None:
            query = query.where(Order.owner_login == filters.owner_login)

        if filters.paid is not None:
            query = query.where(Order.paid.is_(filters.paid))

        if filters.created_since is not None:
            query = query.where(Order.created_at >= filters.created_since)

        return query

    def find_for_update(self, order_id: int) -> Order | None:
        """
        Load an order under a row lock (SELECT ... FOR UPDATE).

        populate_existing() overwrites any stale copy already held by the
        session with the row as it is now.
        """
        query = (
            select(Order)
            .where(Order.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self._db.scalar(query)

    def find_by_owner(self, owner_login: str, limit: int) -> Sequence[Order]:
        """Most recent orders of one owner, newest first."""
        return self.find_all(OrderFilters(owner_login=owner_login, limit=limit))

    def find_unpaid_since(self, since: datetime, limit: int | None = None) -> Sequence[Order]:
        """Unpaid orders created at or after `since`, oldest first."""
        query = (
            select(Order)
            .where(Order.paid.is_(False), Order.created_at >= since)
            .order_by(Order.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return self._db.execute(query).scalars().all()


def get_order_repository(db: Session) -> OrderRepository:
    """Factory function for dependency injection."""
    return OrderRepository(db)
