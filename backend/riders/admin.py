from django.contrib import admin
from riders.models import RiderProfile, Bike, MaintenanceLog


@admin.register(RiderProfile)
class RiderProfileAdmin(admin.ModelAdmin):
    """Admin panel for managing Rider Profiles"""

    list_display = [
        "user",
        "is_online",
        "maintenance_block_override",
        "current_latitude",
        "current_longitude",
        "last_location_update",
    ]

    list_filter = [
        "is_online",
        "maintenance_block_override",
        "last_location_update",
    ]

    search_fields = [
        "user__username",
    ]

    readonly_fields = [
        "last_location_update",
    ]

    ordering = ("user__username",)


@admin.register(Bike)
class BikeAdmin(admin.ModelAdmin):
    list_display = ["user", "brand", "model", "plate", "vehicle_type", "current_km", "created_at"]
    list_filter = ["vehicle_type"]
    search_fields = ["user__username", "plate"]


@admin.register(MaintenanceLog)
class MaintenanceLogAdmin(admin.ModelAdmin):
    list_display = ["bike", "user", "part_name", "category", "wear_percentage", "status", "created_at"]
    list_filter = ["status", "category"]
    search_fields = ["user__username", "part_name"]
