"""
Wallet ledger service - append-only transaction log with running balances.

This module handles:
    - Creating wallets at rider registration
    - Crediting delivery commissions (idempotent per order)
    - Debiting withdrawal requests
    - Reading wallet and ledger state
"""

from .ledger import (
    create_wallet,
    get_wallet,
    list_transactions,
    credit_commission,
    request_withdrawal,
)

from .exceptions import (
    WalletNotFoundError,
    InsufficientBalanceError,
    InvalidAmountError,
)

__all__ = [
    # Ledger operations
    "create_wallet",
    "get_wallet",
    "list_transactions",
    "credit_commission",
    "request_withdrawal",
    # Exceptions
    "WalletNotFoundError",
    "InsufficientBalanceError",
    "InvalidAmountError",
]
