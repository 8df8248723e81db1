"""
Actor context - who a call runs on behalf of.

Every order operation receives an explicit Actor instead of reading a
global "current user".
"""

from dataclasses import dataclass

from shared.config.constants import Roles, STAFF_ROLES
from shared.utils.exceptions import (
    InsufficientRoleError,
    NotOrderOwnerError,
    ValidationError,
)


@dataclass(frozen=True)
class Actor:
    """
    Identity and role of the caller.

    Usage:
        actor = Actor(login="alice", role=Roles.CUSTOMER)
        actor.require_staff()
    """

    login: str
    role: str = Roles.CUSTOMER

    def __post_init__(self):
        if not self.login or not self.login.strip():
            raise ValidationError("Actor login is required")
        if self.role not in Roles.ALL:
            raise ValidationError(f"Unknown role '{self.role}'", role=self.role)

    @classmethod
    def customer(cls, login: str) -> "Actor":
        return cls(login=login, role=Roles.CUSTOMER)

    @classmethod
    def employee(cls, login: str) -> "Actor":
        return cls(login=login, role=Roles.EMPLOYEE)

    @classmethod
    def manager(cls, login: str) -> "Actor":
        return cls(login=login, role=Roles.MANAGER)

    @property
    def is_staff(self) -> bool:
        """Employees and managers."""
        return self.role in STAFF_ROLES

    def can_access(self, owner_login: str) -> bool:
        """Staff may act on any order, customers only on their own."""
        return self.is_staff or self.login == owner_login

    def require_staff(self) -> None:
        """
        Raises:
            InsufficientRoleError: If the actor is not staff
        """
        if not self.is_staff:
            raise InsufficientRoleError(
                sorted(STAFF_ROLES), login=self.login, role=self.role
            )

    def require_access(self, order_id: int, owner_login: str) -> None:
        """
        Raises:
            NotOrderOwnerError: If a customer targets someone else's order
        """
        if not self.can_access(owner_login):
            raise NotOrderOwnerError(order_id, login=self.login)
