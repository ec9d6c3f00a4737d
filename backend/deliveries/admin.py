from django.contrib import admin
from .models import DeliveryOrder, Rating


@admin.register(DeliveryOrder)
class DeliveryOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'store_name', 'rider', 'status', 'priority', 'value',
                    'app_commission', 'estimated_time', 'created_at']
    list_filter = ['status', 'priority', 'created_at']
    search_fields = ['store_name', 'delivery_address', 'rider__username', 'recipient_name']
    readonly_fields = ['created_at', 'accepted_at', 'in_progress_at', 'completed_at', 'cancelled_at']

    fieldsets = (
        ('Store', {
            'fields': ('store', 'store_name', 'store_address', 'store_latitude', 'store_longitude')
        }),
        ('Destination', {
            'fields': ('delivery_address', 'delivery_latitude', 'delivery_longitude',
                       'recipient_name', 'recipient_phone', 'notes')
        }),
        ('Assignment', {
            'fields': ('status', 'priority', 'rider', 'rider_name', 'distance', 'estimated_time')
        }),
        ('Money', {
            'fields': ('value', 'delivery_fee', 'app_commission')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'accepted_at', 'in_progress_at', 'completed_at', 'cancelled_at')
        }),
    )


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ['rider', 'delivery_order', 'rating', 'created_at']
    search_fields = ['rider__username']
