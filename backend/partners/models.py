from django.db import models


class Partner(models.Model):
    """A merchant (store) originating delivery orders, or a partner mechanic."""

    TYPE_STORE = 'STORE'
    TYPE_MECHANIC = 'MECHANIC'
    TYPE_CHOICES = [
        (TYPE_STORE, 'Store'),
        (TYPE_MECHANIC, 'Mechanic'),
    ]

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_STORE)
    address = models.TextField(blank=True)
    latitude = models.DecimalField(max_digits=10, decimal_places=6)
    longitude = models.DecimalField(max_digits=10, decimal_places=6)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)

    # Blocked partners cannot create new delivery orders
    is_blocked = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'partners'
        ordering = ['name']

    def __str__(self):
        return self.name
