from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("partners", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DeliveryOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("store_name", models.CharField(max_length=255)),
                ("store_address", models.TextField(blank=True)),
                ("store_latitude", models.DecimalField(decimal_places=6, max_digits=10)),
                ("store_longitude", models.DecimalField(decimal_places=6, max_digits=10)),
                ("delivery_address", models.TextField()),
                ("delivery_latitude", models.DecimalField(decimal_places=6, max_digits=10)),
                ("delivery_longitude", models.DecimalField(decimal_places=6, max_digits=10)),
                ("recipient_name", models.CharField(blank=True, max_length=255, null=True)),
                ("recipient_phone", models.CharField(blank=True, max_length=20, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("value", models.DecimalField(decimal_places=2, max_digits=10)),
                ("delivery_fee", models.DecimalField(decimal_places=2, max_digits=10)),
                ("app_commission", models.DecimalField(decimal_places=2, default=Decimal("1.00"), max_digits=10)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("accepted", "Accepted"), ("inProgress", "In Progress"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="pending", max_length=20)),
                ("priority", models.CharField(choices=[("low", "Low"), ("normal", "Normal"), ("high", "High"), ("urgent", "Urgent")], default="normal", max_length=10)),
                ("rider_name", models.CharField(blank=True, max_length=255, null=True)),
                ("distance", models.FloatField(blank=True, null=True)),
                ("estimated_time", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("accepted_at", models.DateTimeField(blank=True, null=True)),
                ("in_progress_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("rider", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="delivery_orders", to=settings.AUTH_USER_MODEL)),
                ("store", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="delivery_orders", to="partners.partner")),
            ],
            options={"db_table": "delivery_orders", "ordering": ["-created_at", "-id"]},
        ),
        migrations.AddIndex(
            model_name="deliveryorder",
            index=models.Index(fields=["status"], name="delivery_or_status_idx"),
        ),
        migrations.CreateModel(
            name="Rating",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ("comment", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("delivery_order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="ratings", to="deliveries.deliveryorder")),
                ("rider", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ratings", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "ratings"},
        ),
    ]
