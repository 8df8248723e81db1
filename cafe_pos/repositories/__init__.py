"""
Repository Pattern implementation.
Centralizes data access for the order core.

Usage:
    from cafe_pos.repositories import get_order_repository

    repo = get_order_repository(db)
    order = repo.find_for_update(order_id)
"""

from .base import BaseRepository, RepositoryFilters
from .order import OrderRepository, OrderFilters, get_order_repository
from .item_entry import ItemEntryRepository, ItemEntryFilters, get_item_entry_repository
from .menu_item import MenuItemRepository, MenuItemFilters, get_menu_item_repository

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Order
    "OrderRepository",
    "OrderFilters",
    "get_order_repository",
    # Item entry
    "ItemEntryRepository",
    "ItemEntryFilters",
    "get_item_entry_repository",
    # Menu item
    "MenuItemRepository",
    "MenuItemFilters",
    "get_menu_item_repository",
]
