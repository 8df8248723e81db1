"""
Shared Pydantic schemas used across the order core.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.config.constants import ItemStatus, OrderState
from shared.config.settings import settings
from shared.utils.validators import normalize_item_name, sanitize_comment


# =============================================================================
# Common Types
# =============================================================================

ItemStatusLiteral = Literal["incomplete", "completed"]
OrderStateLiteral = Literal["OPEN", "PAID"]


# =============================================================================
# Order Input Schemas
# =============================================================================


class OrderItemInput(BaseModel):
    """One requested line item: menu item name plus optional comment."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    comment: str = ""

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return normalize_item_name(value)

    @field_validator("comment", mode="before")
    @classmethod
    def _sanitize_comment(cls, value: str | None) -> str:
        return sanitize_comment(value, settings.max_comment_length)


# =============================================================================
# Output Schemas
# =============================================================================


class ItemEntryOutput(BaseModel):
    """A single item entry of an order."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    item_name: str
    status: ItemStatusLiteral
    comment: str
    price_cents: int
    created_at: datetime
    last_updated: datetime


class OrderOutput(BaseModel):
    """Order header: owner, payment flag and total."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_login: str
    paid: bool
    paid_at: datetime | None = None
    total_cents: int
    created_at: datetime

    @property
    def state(self) -> OrderStateLiteral:
        return OrderState.PAID if self.paid else OrderState.OPEN


class OrderStatusOutput(BaseModel):
    """Order plus its item entries, in insertion order."""

    order: OrderOutput
    items: list[ItemEntryOutput]

    @property
    def all_completed(self) -> bool:
        """True once every item of a non-empty order is completed."""
        return bool(self.items) and all(i.status == ItemStatus.COMPLETED for i in self.items)


class MenuItemOutput(BaseModel):
    """Menu catalog row."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    type: str
    price_cents: int
    description: str | None = None
    image_url: str | None = None
