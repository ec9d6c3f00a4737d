"""Custom exceptions for the wallet ledger."""

from common.exceptions import LedgerIntegrityError, RejectedError


class WalletNotFoundError(LedgerIntegrityError):
    """Raised when a rider has no wallet. Wallets are created at registration, so this is fatal."""
    default_code = "wallet_not_found"


class InsufficientBalanceError(RejectedError):
    """Raised when a debit would drive the wallet balance negative."""
    default_code = "insufficient_balance"


class InvalidAmountError(RejectedError):
    """Raised when a ledger amount is zero or negative."""
    default_code = "invalid_amount"
