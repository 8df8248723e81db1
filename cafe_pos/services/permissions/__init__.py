"""
Permission system for order operations.

Usage:
    from cafe_pos.services.permissions import Actor

    actor = Actor.employee("bob")
    actor.require_staff()
"""

from .context import Actor

__all__ = [
    "Actor",
]
