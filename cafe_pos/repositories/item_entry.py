"""
Item Entry Repository - Data access for per-order item status rows.
"""

from dataclasses import dataclass
from typing import Sequence
from sqlalchemy.orm import Session
from sqlalchemy import Select, select, func, update

from cafe_pos.models import ItemEntry
from cafe_pos.models.base import utcnow
from .base import BaseRepository, RepositoryFilters


@dataclass
class ItemEntryFilters(RepositoryFilters):
    """Filters specific to item entries."""

    order_id: int | None = None
    item_name: str | None = None
    status: str | None = None


class ItemEntryRepository(BaseRepository[ItemEntry]):
    """
    Repository for ItemEntry entities.

    Entries are always returned in insertion order (ascending id).
    """

    @property
    def model(self) -> type[ItemEntry]:
        return ItemEntry

    def _base_query(self) -> Select:
        return select(ItemEntry).order_by(ItemEntry.id.asc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entry-specific filters."""
        if not isinstance(filters, ItemEntryFilters):
            filters = ItemEntryFilters(**filters.__dict__)

        if filters.order_id is not None:
            query = query.where(ItemEntry.order_id == filters.order_id)

        if filters.item_name is not None:
            query = query.where(ItemEntry.item_name == filters.item_name)

        if filters.status is not None:
            query = query.where(ItemEntry.status == filters.status)

        return query

    def list_for_order(self, order_id: int) -> Sequence[ItemEntry]:
        """All entries of an order, oldest first (no pagination)."""
        query = (
            self._base_query()
            .where(ItemEntry.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        return self._db.execute(query).scalars().all()

    def find_latest(self, order_id: int, item_name: str) -> ItemEntry | None:
        """Most recently added entry of an item within an order."""
        query = (
            select(ItemEntry)
            .where(ItemEntry.order_id == order_id, ItemEntry.item_name == item_name)
            .order_by(ItemEntry.id.desc())
            .limit(1)
        )
        return self._db.scalar(query)

    def count_by_name(self, order_id: int) -> dict[str, int]:
        """Number of entries per item name within an order."""
        rows = self._db.execute(
            select(ItemEntry.item_name, func.count())
            .where(ItemEntry.order_id == order_id)
            .group_by(ItemEntry.item_name)
        ).all()
        return {name: count for name, count in rows}

    def count_for_order(self, order_id: int) -> int:
        """Number of entries in an order."""
        return self._db.scalar(
            select(func.count())
            .select_from(ItemEntry)
            .where(ItemEntry.order_id == order_id)
        ) or 0

    def sum_prices(self, order_id: int) -> int:
        """Sum of price snapshots over an order's entries."""
        return self._db.scalar(
            select(func.coalesce(func.sum(ItemEntry.price_cents), 0))
            .where(ItemEntry.order_id == order_id)
        ) or 0

    def update_status(self, order_id: int, from_status: str, to_status: str) -> int:
        """
        Bulk-move entries of an order from one status to another.

        Returns the number of rows changed.
        """
        result = self._db.execute(
            update(ItemEntry)
            .where(ItemEntry.order_id == order_id, ItemEntry.status == from_status)
            .values(status=to_status, last_updated=utcnow())
        )
        return result.rowcount or 0


def get_item_entry_repository(db: Session) -> ItemEntryRepository:
    """Factory function for dependency injection."""
    return ItemEntryRepository(db)
