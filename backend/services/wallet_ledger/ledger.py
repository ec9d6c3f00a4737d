"""
Wallet ledger operations.

Every balance change is an append to WalletTransaction plus an F() update
of the wallet row, done while the wallet row is locked so concurrent
writers on the same wallet cannot lose updates.
"""

import logging
from decimal import Decimal
from typing import List

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from wallets.models import Wallet, WalletTransaction
from .exceptions import WalletNotFoundError, InsufficientBalanceError, InvalidAmountError

logger = logging.getLogger(__name__)


def _to_amount(amount) -> Decimal:
    return Decimal(str(amount)).quantize(Decimal('0.01'))


def _lock_wallet(user_id: int) -> Wallet:
    try:
        return Wallet.objects.select_for_update().get(user_id=user_id)
    except Wallet.DoesNotExist:
        raise WalletNotFoundError(f"Wallet not found for user {user_id}")


def create_wallet(user) -> Wallet:
    """Create the zeroed wallet for a newly registered rider."""
    return Wallet.objects.create(user=user)


def get_wallet(user_id: int) -> Wallet:
    try:
        return Wallet.objects.get(user_id=user_id)
    except Wallet.DoesNotExist:
        raise WalletNotFoundError(f"Wallet not found for user {user_id}")


def list_transactions(user_id: int, limit: int = 50, offset: int = 0) -> List[WalletTransaction]:
    wallet = get_wallet(user_id)
    return list(wallet.transactions.all()[offset:offset + limit])


@transaction.atomic
def credit_commission(rider_id: int, amount, delivery_order_id: int) -> WalletTransaction:
    """
    Credit a delivery commission to the rider's wallet.

    Idempotent per delivery order: when a COMMISSION entry already exists
    for the order it is returned and the balance is left untouched.

    Args:
        rider_id: ID of the rider (wallet owner)
        amount: Commission amount
        delivery_order_id: ID of the completed delivery order

    Returns:
        The COMMISSION WalletTransaction for the order

    Raises:
        WalletNotFoundError: If the rider has no wallet
    """
    amount = _to_amount(amount)
    wallet = _lock_wallet(rider_id)

    existing = WalletTransaction.objects.filter(
        delivery_order_id=delivery_order_id,
        type=WalletTransaction.COMMISSION,
    ).first()
    if existing:
        logger.info(
            "Commission for order %s already credited (transaction %s)",
            delivery_order_id, existing.id
        )
        return existing

    now = timezone.now()
    entry = WalletTransaction.objects.create(
        wallet=wallet,
        user_id=rider_id,
        type=WalletTransaction.COMMISSION,
        amount=amount,
        description=f"Commission for order #{delivery_order_id}",
        status=WalletTransaction.COMPLETED,
        delivery_order_id=delivery_order_id,
        completed_at=now,
    )

    Wallet.objects.filter(pk=wallet.pk).update(
        balance=F('balance') + amount,
        total_earned=F('total_earned') + amount,
        updated_at=now,
    )

    logger.info("Credited commission %s to rider %s for order %s", amount, rider_id, delivery_order_id)
    return entry


@transaction.atomic
def request_withdrawal(user_id: int, amount) -> WalletTransaction:
    """
    Debit the wallet for a withdrawal request.

    The entry stays pending until paid out; the balance is reserved
    immediately and can never go negative.
    """
    amount = _to_amount(amount)
    if amount <= 0:
        raise InvalidAmountError("Withdrawal amount must be greater than zero")

    wallet = _lock_wallet(user_id)
    if wallet.balance < amount:
        logger.warning(
            "Withdrawal of %s rejected for user %s: balance %s",
            amount, user_id, wallet.balance
        )
        raise InsufficientBalanceError("Insufficient balance")

    now = timezone.now()
    entry = WalletTransaction.objects.create(
        wallet=wallet,
        user_id=user_id,
        type=WalletTransaction.WITHDRAWAL,
        amount=amount,
        description=f"Withdrawal request of {amount:.2f}",
        status=WalletTransaction.PENDING,
    )

    Wallet.objects.filter(pk=wallet.pk).update(
        balance=F('balance') - amount,
        total_withdrawn=F('total_withdrawn') + amount,
        updated_at=now,
    )

    logger.info("Withdrawal of %s requested by user %s", amount, user_id)
    return entry
