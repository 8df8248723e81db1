"""
Menu Item Repository - Read access to the menu catalog.
"""

from dataclasses import dataclass
from sqlalchemy.orm import Session
from sqlalchemy import Select, select

from cafe_pos.models import MenuItem
from .base import BaseRepository, RepositoryFilters


@dataclass
class MenuItemFilters(RepositoryFilters):
    """Filters specific to menu items."""

    type: str | None = None


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository for MenuItem entities, keyed by name."""

    @property
    def model(self) -> type[MenuItem]:
        return MenuItem

    def _base_query(self) -> Select:
        return select(MenuItem).order_by(MenuItem.type, MenuItem.name)

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, MenuItemFilters):
            filters = MenuItemFilters(**filters.__dict__)

        if filters.type is not None:
            query = query.where(MenuItem.type == filters.type)

        return query

    def find_by_name(self, name: str) -> MenuItem | None:
        """Exact-name lookup."""
        return self._db.scalar(select(MenuItem).where(MenuItem.name == name))

    def find_prices(self, names: list[str]) -> dict[str, int]:
        """Batch price lookup; names missing from the menu are absent."""
        if not names:
            return {}
        rows = self._db.execute(
            select(MenuItem.name, MenuItem.price_cents).where(MenuItem.name.in_(sorted(set(names))))
        ).all()
        return {name: price for name, price in rows}


def get_menu_item_repository(db: Session) -> MenuItemRepository:
    """Factory function for dependency injection."""
    return MenuItemRepository(db)
