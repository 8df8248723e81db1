"""
Catalog Services - menu price lookup for the order core.
"""

from .menu_catalog import MenuCatalog, SqlMenuCatalog

__all__ = [
    "MenuCatalog",
    "SqlMenuCatalog",
]
