"""
Order management service - Core delivery order lifecycle operations.

This module handles:
    - Creating delivery orders
    - Accepting orders (commission, distance and ETA lock-in)
    - Status transitions and completion effects
    - Querying orders
"""

from .order_lifecycle import (
    OrderFilters,
    create_order,
    accept_order,
    update_order_status,
    list_orders,
    get_order_by_id,
    matching_criteria_for_order,
    commission_for,
)

from .exceptions import (
    OrderNotFoundError,
    OrderNotAvailableError,
    InvalidTransitionError,
    RiderNotFoundError,
    RiderBlockedByMaintenanceError,
    PartnerNotFoundError,
    PartnerBlockedError,
)

__all__ = [
    # Lifecycle operations
    "OrderFilters",
    "create_order",
    "accept_order",
    "update_order_status",
    "list_orders",
    "get_order_by_id",
    "matching_criteria_for_order",
    "commission_for",
    # Exceptions
    "OrderNotFoundError",
    "OrderNotAvailableError",
    "InvalidTransitionError",
    "RiderNotFoundError",
    "RiderBlockedByMaintenanceError",
    "PartnerNotFoundError",
    "PartnerBlockedError",
]
