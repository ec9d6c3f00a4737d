from django.contrib import admin
from partners.models import Partner


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "address", "is_blocked", "created_at")
    list_filter = ("type", "is_blocked")
    search_fields = ("name", "address", "email")
