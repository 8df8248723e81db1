"""
Menu Models: MenuItem.

The menu belongs to catalog management; the order core only reads it.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class MenuItem(TimestampMixin, Base):
    """
    A purchasable menu item, keyed by its unique name.
    Prices are stored in cents.
    """

    __tablename__ = "menu_item"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="chk_menu_item_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<MenuItem(name='{self.name}', price_cents={self.price_cents})>"
