"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
but are decoupled from the HTTP layer.

Modules:
    - order_management: Core delivery order lifecycle operations
    - matching: Rider eligibility and ranking
    - wallet_ledger: Rider wallets and commission/withdrawal ledger
"""

# Expose commonly used functions at package level
from .matching import (
    MatchingCriteria,
    find_matching_riders,
)
from .order_management import (
    create_order,
    accept_order,
    update_order_status,
    list_orders,
    get_order_by_id,
    OrderNotFoundError,
    OrderNotAvailableError,
    InvalidTransitionError,
)
from .wallet_ledger import (
    credit_commission,
    request_withdrawal,
    InsufficientBalanceError,
)

__all__ = [
    # Matching
    "MatchingCriteria",
    "find_matching_riders",
    # Order management
    "create_order",
    "accept_order",
    "update_order_status",
    "list_orders",
    "get_order_by_id",
    # Wallet ledger
    "credit_commission",
    "request_withdrawal",
    # Exceptions
    "OrderNotFoundError",
    "OrderNotAvailableError",
    "InvalidTransitionError",
    "InsufficientBalanceError",
]
