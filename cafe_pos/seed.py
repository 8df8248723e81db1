"""
Default café menu.

Seeds the menu_item table so the order core can run stand-alone. Seeding
is idempotent: items already on the menu are left untouched, so prices
edited after the first seed survive a re-run.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from cafe_pos.models import MenuItem
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.validators import normalize_item_name, validate_price_cents

logger = get_logger(__name__)


DEFAULT_MENU: list[dict] = [
    # Drinks
    {"name": "Coffee", "type": "drinks", "price_cents": 300,
     "description": "Fresh drip coffee"},
    {"name": "Espresso", "type": "drinks", "price_cents": 275,
     "description": "Double shot"},
    {"name": "Latte", "type": "drinks", "price_cents": 425,
     "description": "Espresso with steamed milk"},
    {"name": "Cappuccino", "type": "drinks", "price_cents": 400,
     "description": "Espresso with milk foam"},
    {"name": "Hot Tea", "type": "drinks", "price_cents": 250,
     "description": "Black, green or herbal"},
    {"name": "Hot Chocolate", "type": "drinks", "price_cents": 350,
     "description": "With whipped cream"},
    # Food
    {"name": "Muffin", "type": "food", "price_cents": 250,
     "description": "Blueberry or chocolate chip"},
    {"name": "Croissant", "type": "food", "price_cents": 300,
     "description": "Butter croissant"},
    {"name": "Bagel", "type": "food", "price_cents": 325,
     "description": "With cream cheese"},
    {"name": "Sandwich", "type": "food", "price_cents": 750,
     "description": "Turkey and cheese on sourdough"},
    # Desserts
    {"name": "Cheesecake", "type": "desserts", "price_cents": 550,
     "description": "New York style slice"},
    {"name": "Brownie", "type": "desserts", "price_cents": 300,
     "description": "Fudge brownie"},
]


def seed_menu(db: Session, items: list[dict] | None = None) -> int:
    """
    Insert menu items that are not on the menu yet.

    Returns:
        Number of items inserted
    """
    items = DEFAULT_MENU if items is None else items

    existing = set(db.scalars(select(MenuItem.name)).all())
    inserted = 0

    for data in items:
        name = normalize_item_name(data["name"])
        if name in existing:
            continue

        db.add(
            MenuItem(
                name=name,
                type=data.get("type", "other"),
                price_cents=validate_price_cents(data["price_cents"]),
                description=data.get("description"),
                image_url=data.get("image_url"),
            )
        )
        existing.add(name)
        inserted += 1

    safe_commit(db)

    logger.info("Menu seeded", inserted=inserted, skipped=len(items) - inserted)
    return inserted
