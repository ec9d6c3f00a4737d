from django.db import models
from django.contrib.auth.models import AbstractUser
from django.utils import timezone


class User(AbstractUser):
    """Extended user model with role and subscription tier"""
    ROLE_RIDER = 'rider'
    ROLE_PARTNER = 'partner'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_RIDER, 'Rider'),
        (ROLE_PARTNER, 'Partner'),
        (ROLE_ADMIN, 'Admin'),
    ]

    SUBSCRIPTION_STANDARD = 'standard'
    SUBSCRIPTION_PREMIUM = 'premium'
    SUBSCRIPTION_CHOICES = [
        (SUBSCRIPTION_STANDARD, 'Standard'),
        (SUBSCRIPTION_PREMIUM, 'Premium'),
    ]

    # Role & basic info
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_RIDER)
    phone_number = models.CharField(max_length=15, blank=True)

    # Subscription tier (drives commission and matching priority)
    is_subscriber = models.BooleanField(default=False)
    subscription_type = models.CharField(
        max_length=10, choices=SUBSCRIPTION_CHOICES, default=SUBSCRIPTION_STANDARD
    )
    subscription_expires_at = models.DateTimeField(null=True, blank=True)

    loyalty_points = models.IntegerField(default=0)
    verification_badge = models.BooleanField(default=False)

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    @property
    def is_premium(self) -> bool:
        """
        Active premium subscriber: premium tier, subscribed, and not past
        `subscription_expires_at`. Lapsed subscriptions earn the standard
        commission and lose matching priority. A subscription without expiry
        never lapses.
        """
        if not (self.is_subscriber and self.subscription_type == self.SUBSCRIPTION_PREMIUM):
            return False
        return self.subscription_expires_at is None or self.subscription_expires_at > timezone.now()
