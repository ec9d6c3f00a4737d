from django.contrib import admin
from .models import Wallet, WalletTransaction


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ['user', 'balance', 'total_earned', 'total_withdrawn', 'updated_at']
    search_fields = ['user__username']
    readonly_fields = ['balance', 'total_earned', 'total_withdrawn', 'created_at', 'updated_at']


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'type', 'amount', 'status', 'delivery_order', 'created_at']
    list_filter = ['type', 'status', 'created_at']
    search_fields = ['user__username', 'description']

    # Ledger entries are append-only
    def has_delete_permission(self, request, obj=None):
        return False
