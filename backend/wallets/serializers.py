from rest_framework import serializers

from .models import Wallet, WalletTransaction


class WalletTransactionSerializer(serializers.ModelSerializer):
    delivery_order_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = WalletTransaction
        fields = ['id', 'type', 'amount', 'description', 'status',
                  'delivery_order_id', 'created_at', 'completed_at']
        read_only_fields = fields


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = ['id', 'balance', 'total_earned', 'total_withdrawn', 'created_at', 'updated_at']
        read_only_fields = fields


class WithdrawalSerializer(serializers.Serializer):
    """Amount to withdraw; the ledger rejects non-positive amounts"""
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
