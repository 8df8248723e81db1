"""
Centralized constants for the order core.
Avoids magic strings and repeated constants.

Usage:
    from shared.config.constants import Roles, STAFF_ROLES, ItemStatus

    if actor.role in STAFF_ROLES:
        ...

    if entry.status == ItemStatus.INCOMPLETE:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants (user types of the café)."""

    CUSTOMER: Final[str] = "customer"
    EMPLOYEE: Final[str] = "employee"
    MANAGER: Final[str] = "manager"

    ALL: Final[list[str]] = [CUSTOMER, EMPLOYEE, MANAGER]


# Role groups for common access patterns
STAFF_ROLES: Final[frozenset[str]] = frozenset({Roles.EMPLOYEE, Roles.MANAGER})


# =============================================================================
# Entity Status Constants
# =============================================================================


class ItemStatus:
    """Preparation status of a single item entry."""

    INCOMPLETE: Final[str] = "incomplete"
    COMPLETED: Final[str] = "completed"

    ALL: Final[list[str]] = [INCOMPLETE, COMPLETED]


# Allowed status transitions (staff only advance, never rewind)
ITEM_STATUS_TRANSITIONS: Final[dict[str, frozenset[str]]] = {
    ItemStatus.INCOMPLETE: frozenset({ItemStatus.COMPLETED}),
    ItemStatus.COMPLETED: frozenset(),
}


class OrderState:
    """Observable lifecycle states of an order."""

    OPEN: Final[str] = "OPEN"
    PAID: Final[str] = "PAID"


def can_transition_item(from_status: str, to_status: str) -> bool:
    """Check whether an item entry may move from one status to another."""
    return to_status in ITEM_STATUS_TRANSITIONS.get(from_status, frozenset())


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Input and query limits."""

    MAX_ITEM_NAME_LENGTH: Final[int] = 50
    MAX_ITEMS_PER_CALL: Final[int] = 100
    MAX_ORDER_HISTORY: Final[int] = 100

    # Repository pagination
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200
