"""
Menu catalog lookup.

The order core reads prices through the MenuCatalog interface only; menu
management (browsing, editing prices) lives outside the core. The price
returned at lookup time is the snapshot stored on the item entry, so later
price changes never alter placed orders.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from sqlalchemy.orm import Session

from cafe_pos.repositories import get_menu_item_repository
from shared.utils.exceptions import UnknownItemError
from shared.utils.schemas import MenuItemOutput


class MenuCatalog(ABC):
    """Read-only item name -> price lookup."""

    @abstractmethod
    def price_of(self, item_name: str) -> int:
        """
        Current price of an item, in cents.

        Raises:
            UnknownItemError: If the item is not on the menu
        """
        ...

    def prices_of(self, item_names: Sequence[str]) -> list[int]:
        """
        Prices for several items, in the order given.

        Raises:
            UnknownItemError: For the first name not on the menu
        """
        return [self.price_of(name) for name in item_names]


class SqlMenuCatalog(MenuCatalog):
    """Catalog backed by the menu_item table."""

    def __init__(self, db: Session):
        self._repo = get_menu_item_repository(db)

    def price_of(self, item_name: str) -> int:
        item = self._repo.find_by_name(item_name)
        if item is None:
            raise UnknownItemError(item_name)
        return item.price_cents

    def prices_of(self, item_names: Sequence[str]) -> list[int]:
        # One query for the batch; report the first miss in input order
        prices = self._repo.find_prices(list(item_names))
        for name in item_names:
            if name not in prices:
                raise UnknownItemError(name)
        return [prices[name] for name in item_names]

    def get_item(self, item_name: str) -> MenuItemOutput:
        item = self._repo.find_by_name(item_name)
        if item is None:
            raise UnknownItemError(item_name)
        return MenuItemOutput.model_validate(item)
