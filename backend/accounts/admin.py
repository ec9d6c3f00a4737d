from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from accounts.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Users with delivery role and subscription tier"""

    list_display = ["username", "email", "role", "subscription_type", "is_subscriber",
                    "subscription_expires_at", "loyalty_points", "is_active"]
    list_filter = ["role", "is_subscriber", "subscription_type", "verification_badge"]
    search_fields = ["username", "email", "phone_number", "first_name", "last_name"]
    ordering = ("username",)

    # Premium tier drives commission and matching priority
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Role", {"fields": ("role", "phone_number", "verification_badge")}),
        ("Subscription", {"fields": ("is_subscriber", "subscription_type", "subscription_expires_at")}),
        ("Loyalty", {"fields": ("loyalty_points",)}),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Role", {"fields": ("role", "phone_number")}),
    )
