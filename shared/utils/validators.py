"""
Shared validators for input normalization.
"""

import re

from shared.config.constants import Limits

# Control characters are stripped from free text (tabs and newlines survive)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def normalize_item_name(name: str | None) -> str:
    """
    Normalize a menu item name for lookups.

    Collapses internal whitespace and trims the ends. Case is preserved:
    menu names are case-sensitive keys.

    Raises:
        ValueError: If the name is empty or too long
    """
    if name is None:
        raise ValueError("Item name is required")

    normalized = " ".join(name.split())
    if not normalized:
        raise ValueError("Item name is required")

    if len(normalized) > Limits.MAX_ITEM_NAME_LENGTH:
        raise ValueError(
            f"Item name exceeds {Limits.MAX_ITEM_NAME_LENGTH} characters"
        )

    return normalized


def sanitize_comment(comment: str | None, max_length: int) -> str:
    """
    Sanitize a free-text item comment.

    None becomes the empty string; control characters are removed.

    Raises:
        ValueError: If the comment is longer than max_length
    """
    if comment is None:
        return ""

    cleaned = _CONTROL_CHARS.sub("", comment).strip()
    if len(cleaned) > max_length:
        raise ValueError(f"Comment exceeds {max_length} characters")

    return cleaned


def validate_price_cents(price_cents: int) -> int:
    """
    Validate a catalog price in cents.

    Raises:
        ValueError: If the price is negative or not an integer
    """
    if isinstance(price_cents, bool) or not isinstance(price_cents, int):
        raise ValueError("Price must be an integer number of cents")
    if price_cents < 0:
        raise ValueError("Price cannot be negative")
    return price_cents
