"""Custom exceptions for delivery order management."""

from common.exceptions import InvalidStateError, NotFoundError, RejectedError


class OrderNotFoundError(NotFoundError):
    """Raised when a delivery order cannot be found."""
    default_code = "order_not_found"


class RiderNotFoundError(NotFoundError):
    """Raised when a rider cannot be found."""
    default_code = "rider_not_found"


class PartnerNotFoundError(NotFoundError):
    """Raised when the store for a new order cannot be found."""
    default_code = "partner_not_found"


class OrderNotAvailableError(InvalidStateError):
    """Raised when an order is no longer pending and cannot be accepted."""
    default_code = "order_not_available"


class InvalidTransitionError(InvalidStateError):
    """Raised when a status change does not follow the order lifecycle."""
    default_code = "invalid_transition"


class PartnerBlockedError(RejectedError):
    """Raised when a blocked partner tries to create an order."""
    status_code = 403
    default_code = "partner_blocked"


class RiderBlockedByMaintenanceError(RejectedError):
    """Raised when a rider with critical maintenance pending tries to accept an order."""
    status_code = 403
    default_code = "rider_blocked_by_maintenance"
