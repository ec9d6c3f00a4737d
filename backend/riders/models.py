from django.db import models
from django.utils import timezone
from django.conf import settings

User = settings.AUTH_USER_MODEL


class RiderProfile(models.Model):
    """Rider availability and live location"""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='rider_profile')

    # Status & location (reported by the rider app)
    is_online = models.BooleanField(default=False)
    current_latitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)
    current_longitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)
    last_location_update = models.DateTimeField(null=True, blank=True)

    # Admin escape hatch: match and accept even with critical maintenance records
    maintenance_block_override = models.BooleanField(default=False)

    class Meta:
        db_table = 'rider_profiles'

    def __str__(self):
        return f"{self.user.username} - {'online' if self.is_online else 'offline'}"

    @property
    def has_location(self) -> bool:
        return self.current_latitude is not None and self.current_longitude is not None


class Bike(models.Model):
    """A rider's vehicle. The most recently created one is the rider's current vehicle."""

    MOTORCYCLE = 'MOTORCYCLE'
    BICYCLE = 'BICYCLE'
    VEHICLE_TYPE_CHOICES = [
        (MOTORCYCLE, 'Motorcycle'),
        (BICYCLE, 'Bicycle'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='bikes')
    model = models.CharField(max_length=100)
    brand = models.CharField(max_length=100, blank=True)
    plate = models.CharField(max_length=20, blank=True)
    vehicle_type = models.CharField(max_length=20, choices=VEHICLE_TYPE_CHOICES, default=MOTORCYCLE)
    current_km = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'bikes'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.brand} {self.model} ({self.vehicle_type})".strip()


class MaintenanceLog(models.Model):
    """Wear record for one part of a bike."""

    STATUS_OK = 'OK'
    STATUS_ATENCAO = 'ATENCAO'
    STATUS_CRITICO = 'CRITICO'
    STATUS_CHOICES = [
        (STATUS_OK, 'OK'),
        (STATUS_ATENCAO, 'Attention'),
        (STATUS_CRITICO, 'Critical'),
    ]

    CATEGORY_CHOICES = [
        ('OLEO', 'Oil'),
        ('PNEUS', 'Tyres'),
        ('TRAVOES', 'Brakes'),
        ('FILTROS', 'Filters'),
        ('TRANSMISSAO', 'Transmission'),
    ]

    # Wear at or above this fraction blocks the rider from matching
    CRITICAL_WEAR = 0.9

    bike = models.ForeignKey(Bike, on_delete=models.CASCADE, related_name='maintenance_logs')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='maintenance_logs')
    part_name = models.CharField(max_length=100)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    last_change_km = models.PositiveIntegerField(default=0)
    recommended_change_km = models.PositiveIntegerField(default=0)
    current_km = models.PositiveIntegerField(default=0)
    wear_percentage = models.FloatField(default=0.0)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OK)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'maintenance_logs'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.part_name} {self.status} ({self.wear_percentage:.0%})"

    @property
    def is_critical(self) -> bool:
        return self.status == self.STATUS_CRITICO or self.wear_percentage >= self.CRITICAL_WEAR
