"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, get_settings
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Roles,
    ItemStatus,
    OrderState,
    Limits,
    STAFF_ROLES,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Roles",
    "ItemStatus",
    "OrderState",
    "Limits",
    "STAFF_ROLES",
]
