from decimal import Decimal

from django.db import models
from django.conf import settings


class Wallet(models.Model):
    """Running balance per rider. Created together with the rider."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='wallet'
    )
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_earned = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_withdrawn = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'wallets'

    def __str__(self):
        return f"Wallet of {self.user} - {self.balance}"


class WalletTransaction(models.Model):
    """Append-only ledger entry."""

    COMMISSION = 'COMMISSION'
    WITHDRAWAL = 'WITHDRAWAL'
    BONUS = 'BONUS'
    REFUND = 'REFUND'
    TYPE_CHOICES = [
        (COMMISSION, 'Commission'),
        (WITHDRAWAL, 'Withdrawal'),
        (BONUS, 'Bonus'),
        (REFUND, 'Refund'),
    ]

    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (COMPLETED, 'Completed'),
        (FAILED, 'Failed'),
        (CANCELLED, 'Cancelled'),
    ]

    wallet = models.ForeignKey(Wallet, on_delete=models.PROTECT, related_name='transactions')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='wallet_transactions'
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    delivery_order = models.ForeignKey(
        'deliveries.DeliveryOrder',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='wallet_transactions'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'wallet_transactions'
        ordering = ['-created_at', '-id']
        constraints = [
            # One commission per delivery order, whatever the retry story
            models.UniqueConstraint(
                fields=['delivery_order', 'type'],
                condition=models.Q(type='COMMISSION'),
                name='unique_commission_per_order'
            )
        ]

    def __str__(self):
        return f"{self.type} {self.amount} ({self.status})"
