"""
Order Models: Order, ItemEntry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import ItemStatus, OrderState

from .base import Base, IdType, TimestampMixin, utcnow


class Order(TimestampMixin, Base):
    """
    A customer's order: owner, payment flag and running total.

    total_cents always equals the sum of price_cents over the order's
    item entries. Once paid, neither the entries nor the total change.
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    owner_login: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    total_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    items: Mapped[list["ItemEntry"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ItemEntry.id",
    )

    __table_args__ = (
        CheckConstraint("total_cents >= 0", name="chk_orders_total_non_negative"),
        # Open orders query (paid + created_at)
        Index("ix_orders_paid_created", "paid", "created_at"),
        # Order history query (owner + created_at)
        Index("ix_orders_owner_created", "owner_login", "created_at"),
    )

    @property
    def state(self) -> str:
        return OrderState.PAID if self.paid else OrderState.OPEN

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, owner='{self.owner_login}', "
            f"paid={self.paid}, total_cents={self.total_cents})>"
        )


class ItemEntry(Base):
    """
    One line item of an order with its preparation status.

    The same menu item may appear several times in one order; entries are
    told apart by their autoincrementing id, which also gives insertion
    order. price_cents is the catalog price captured when the item was added.
    """

    __tablename__ = "item_status"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_name: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=ItemStatus.INCOMPLETE, nullable=False
    )  # incomplete, completed
    comment: Mapped[str] = mapped_column(Text, default="", nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="chk_item_status_price_non_negative"),
        CheckConstraint(
            "status IN ('incomplete', 'completed')", name="chk_item_status_status"
        ),
        # LIFO removal lookup (order_id + item_name, newest id first)
        Index("ix_item_status_order_name", "order_id", "item_name"),
    )

    def __repr__(self) -> str:
        return (
            f"<ItemEntry(id={self.id}, order_id={self.order_id}, "
            f"item='{self.item_name}', status='{self.status}')>"
        )
