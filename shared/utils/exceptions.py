"""
Exceptions of the order core.

Every error is an AppException: an HTTPException that carries the status
code a presentation layer should answer with, and that logs itself with
its keyword context when raised.

Usage:
    from shared.utils.exceptions import OrderNotFoundError, OrderPaidError

    raise OrderNotFoundError(order_id)
    raise OrderPaidError(order_id, action="add items to")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    Subclasses pick their status with `default_status` and their log level
    with `log_level`; both can be overridden per instance.
    """

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    log_level: str = "warning"

    def __init__(
        self,
        detail: str,
        *,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        status_code = status_code or self.default_status
        log_fn = getattr(logger, self.log_level, logger.warning)
        log_fn(detail, status_code=status_code, error_type=type(self).__name__, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.log_context = log_context

    def __str__(self) -> str:
        return self.detail


# =============================================================================
# Categories
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found (404).

    Usage:
        raise NotFoundError("Menu item", "Latte")
    """

    default_status = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        detail = f"{entity} '{entity_id}' not found" if entity_id is not None else f"{entity} not found"
        super().__init__(detail, entity=entity, entity_id=entity_id, **log_context)


class ForbiddenError(AppException):
    """
    Actor may not perform the action (403).

    Usage:
        raise ForbiddenError("complete items", login=actor.login)
    """

    default_status = status.HTTP_403_FORBIDDEN

    def __init__(self, action: str | None = None, **log_context: Any):
        detail = f"Not allowed to {action}" if action else "Access denied"
        super().__init__(detail, action=action, **log_context)


class ValidationError(AppException):
    """
    Malformed input (400).

    Usage:
        raise ValidationError("At least one item is required", field="items")
    """

    default_status = status.HTTP_400_BAD_REQUEST


class ConflictError(AppException):
    """Request conflicts with the current state of the order (409)."""

    default_status = status.HTTP_409_CONFLICT


class InternalError(AppException):
    """Unexpected failure inside the core (500)."""

    log_level = "error"

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(detail, **log_context)


class ExternalServiceError(AppException):
    """A dependency failed (502) or is unavailable (503)."""

    log_level = "error"

    def __init__(
        self,
        service: str,
        is_unavailable: bool = False,
        retry_after: int | None = None,
        **log_context: Any,
    ):
        if is_unavailable:
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            detail = f"Service {service} temporarily unavailable"
        else:
            status_code = status.HTTP_502_BAD_GATEWAY
            detail = f"Error communicating with {service}"

        super().__init__(
            detail,
            status_code=status_code,
            headers={"Retry-After": str(retry_after)} if retry_after else None,
            service=service,
            **log_context,
        )


# =============================================================================
# Order core errors
# =============================================================================


class OrderNotFoundError(NotFoundError):
    """Order id does not reference an existing order."""

    def __init__(self, order_id: int | None = None, **log_context: Any):
        super().__init__("Order", order_id, **log_context)
        self.order_id = order_id


class UnknownItemError(NotFoundError):
    """Item name is not on the menu."""

    def __init__(self, item_name: str, **log_context: Any):
        super().__init__("Menu item", item_name, **log_context)
        self.item_name = item_name


class ItemNotInOrderError(NotFoundError):
    """Removal target is not present in the order (often enough)."""

    def __init__(self, order_id: int, item_name: str, **log_context: Any):
        super().__init__(f"Item in order {order_id}", item_name, order_id=order_id, **log_context)
        self.order_id = order_id
        self.item_name = item_name


class InsufficientRoleError(ForbiddenError):
    """Actor lacks a staff role."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        super().__init__(
            f"perform this action (requires role: {', '.join(required_roles)})",
            required_roles=required_roles,
            **log_context,
        )


class NotOrderOwnerError(ForbiddenError):
    """Customer tried to act on another user's order."""

    def __init__(self, order_id: int, **log_context: Any):
        super().__init__(f"access order {order_id}", order_id=order_id, **log_context)


class InvalidTransitionError(ValidationError):
    """Status change that the item lifecycle does not allow."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        super().__init__(
            f"Invalid transition from '{from_status}' to '{to_status}' for {entity}",
            entity=entity,
            from_status=from_status,
            to_status=to_status,
            **log_context,
        )


class OrderPaidError(ConflictError):
    """Mutation attempted on a paid (immutable) order."""

    def __init__(self, order_id: int, action: str = "modify", **log_context: Any):
        super().__init__(
            f"Cannot {action} order {order_id}: it has already been paid",
            order_id=order_id,
            action=action,
            **log_context,
        )
        self.order_id = order_id


class AlreadyPaidError(ConflictError):
    """Order was settled twice."""

    def __init__(self, order_id: int, **log_context: Any):
        super().__init__(f"Order {order_id} is already paid", order_id=order_id, **log_context)
        self.order_id = order_id


class InvariantViolationError(InternalError):
    """
    Internal consistency check failed, e.g. a total that would go negative
    or drifted from its items. Signals a defect, never a user mistake.
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(f"Invariant violated: {detail}", **log_context)


class StorageUnavailableError(ExternalServiceError):
    """Persistence could not complete the operation in time; safe to retry."""

    def __init__(self, reason: str, **log_context: Any):
        super().__init__("storage", is_unavailable=True, retry_after=1, reason=reason, **log_context)
        self.reason = reason
