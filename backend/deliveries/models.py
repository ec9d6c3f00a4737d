from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.conf import settings


class DeliveryOrder(models.Model):
    """A shipment request from a partner store to a recipient."""

    PENDING = 'pending'
    ACCEPTED = 'accepted'
    IN_PROGRESS = 'inProgress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]
    TERMINAL_STATUSES = (COMPLETED, CANCELLED)
    ACTIVE_STATUSES = (ACCEPTED, IN_PROGRESS)

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('normal', 'Normal'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]

    # Rider payout before acceptance; not authoritative
    PLACEHOLDER_COMMISSION = Decimal('1.00')

    # Origin
    store = models.ForeignKey(
        'partners.Partner',
        on_delete=models.PROTECT,
        related_name='delivery_orders'
    )
    store_name = models.CharField(max_length=255)
    store_address = models.TextField(blank=True)
    store_latitude = models.DecimalField(max_digits=10, decimal_places=6)
    store_longitude = models.DecimalField(max_digits=10, decimal_places=6)

    # Destination
    delivery_address = models.TextField()
    delivery_latitude = models.DecimalField(max_digits=10, decimal_places=6)
    delivery_longitude = models.DecimalField(max_digits=10, decimal_places=6)

    recipient_name = models.CharField(max_length=255, null=True, blank=True)
    recipient_phone = models.CharField(max_length=20, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    # Money
    value = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2)
    app_commission = models.DecimalField(max_digits=10, decimal_places=2, default=PLACEHOLDER_COMMISSION)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal')

    # Assigned at acceptance
    rider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='delivery_orders'
    )
    rider_name = models.CharField(max_length=255, null=True, blank=True)
    distance = models.FloatField(null=True, blank=True)
    estimated_time = models.PositiveIntegerField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    in_progress_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'delivery_orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status'], name='delivery_or_status_idx'),
        ]

    def __str__(self):
        return f"Order #{self.id} - {self.store_name} - {self.status}"


class Rating(models.Model):
    """Score given to a rider, optionally tied to a delivery."""

    rider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='ratings'
    )
    delivery_order = models.ForeignKey(
        DeliveryOrder,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='ratings'
    )
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ratings'

    def __str__(self):
        return f"{self.rating}* for {self.rider}"
