from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="RiderProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_online", models.BooleanField(default=False)),
                ("current_latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ("current_longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ("last_location_update", models.DateTimeField(blank=True, null=True)),
                ("maintenance_block_override", models.BooleanField(default=False)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="rider_profile", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "rider_profiles"},
        ),
        migrations.CreateModel(
            name="Bike",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("model", models.CharField(max_length=100)),
                ("brand", models.CharField(blank=True, max_length=100)),
                ("plate", models.CharField(blank=True, max_length=20)),
                ("vehicle_type", models.CharField(choices=[("MOTORCYCLE", "Motorcycle"), ("BICYCLE", "Bicycle")], default="MOTORCYCLE", max_length=20)),
                ("current_km", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bikes", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "bikes", "ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="MaintenanceLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part_name", models.CharField(max_length=100)),
                ("category", models.CharField(choices=[("OLEO", "Oil"), ("PNEUS", "Tyres"), ("TRAVOES", "Brakes"), ("FILTROS", "Filters"), ("TRANSMISSAO", "Transmission")], max_length=20)),
                ("last_change_km", models.PositiveIntegerField(default=0)),
                ("recommended_change_km", models.PositiveIntegerField(default=0)),
                ("current_km", models.PositiveIntegerField(default=0)),
                ("wear_percentage", models.FloatField(default=0.0)),
                ("status", models.CharField(choices=[("OK", "OK"), ("ATENCAO", "Attention"), ("CRITICO", "Critical")], default="OK", max_length=10)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("bike", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="maintenance_logs", to="riders.bike")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="maintenance_logs", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "maintenance_logs", "ordering": ["-created_at"]},
        ),
    ]
