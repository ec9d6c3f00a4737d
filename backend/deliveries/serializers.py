from django.conf import settings
from rest_framework import serializers

from .models import DeliveryOrder


class DeliveryOrderSerializer(serializers.ModelSerializer):
    """Serializer for Delivery Orders"""
    store_id = serializers.IntegerField(read_only=True)
    rider_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = DeliveryOrder
        fields = ['id', 'store_id', 'store_name', 'store_address', 'store_latitude', 'store_longitude',
                  'delivery_address', 'delivery_latitude', 'delivery_longitude',
                  'recipient_name', 'recipient_phone', 'notes',
                  'value', 'delivery_fee', 'app_commission', 'status', 'priority',
                  'rider_id', 'rider_name', 'distance', 'estimated_time',
                  'created_at', 'accepted_at', 'in_progress_at', 'completed_at', 'cancelled_at']
        read_only_fields = fields


class CreateDeliveryOrderSerializer(serializers.Serializer):
    """Serializer for creating delivery orders; store fields default from the partner"""
    store_id = serializers.IntegerField()
    store_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    store_address = serializers.CharField(required=False, allow_blank=True)
    store_latitude = serializers.DecimalField(max_digits=10, decimal_places=6, required=False,
                                              min_value=-90, max_value=90)
    store_longitude = serializers.DecimalField(max_digits=10, decimal_places=6, required=False,
                                               min_value=-180, max_value=180)

    delivery_address = serializers.CharField()
    delivery_latitude = serializers.DecimalField(max_digits=10, decimal_places=6, min_value=-90, max_value=90)
    delivery_longitude = serializers.DecimalField(max_digits=10, decimal_places=6, min_value=-180, max_value=180)

    recipient_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    recipient_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    delivery_fee = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    priority = serializers.ChoiceField(choices=DeliveryOrder.PRIORITY_CHOICES, default='normal')


class AcceptOrderSerializer(serializers.Serializer):
    """Rider accepting an order. Defaults to the requesting user."""
    rider_id = serializers.IntegerField(required=False)
    rider_name = serializers.CharField(max_length=255, required=False)


class StatusUpdateSerializer(serializers.Serializer):
    # Unknown values are rejected by the lifecycle as invalid transitions
    status = serializers.CharField(max_length=20)


class MatchingQuerySerializer(serializers.Serializer):
    """Query parameters for ad-hoc rider matching"""
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.FloatField(min_value=0, required=False)
    store_lat = serializers.FloatField(min_value=-90, max_value=90, required=False)
    store_lng = serializers.FloatField(min_value=-180, max_value=180, required=False)
    delivery_lat = serializers.FloatField(min_value=-90, max_value=90, required=False)
    delivery_lng = serializers.FloatField(min_value=-180, max_value=180, required=False)

    def validate(self, attrs):
        attrs.setdefault('radius', settings.DEFAULT_MATCHING_RADIUS_KM)
        return attrs


class RiderCandidateSerializer(serializers.Serializer):
    """Read-only view of a ranked rider candidate"""
    rider_id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.CharField()
    distance = serializers.SerializerMethodField()
    trip_distance = serializers.SerializerMethodField()
    vehicle_type = serializers.CharField()
    estimated_time = serializers.IntegerField()
    is_premium = serializers.BooleanField()
    average_rating = serializers.FloatField()
    active_orders = serializers.IntegerField()
    current_latitude = serializers.FloatField()
    current_longitude = serializers.FloatField()
    verification_badge = serializers.BooleanField()

    def get_distance(self, obj):
        return round(obj.distance, 2)

    def get_trip_distance(self, obj):
        if obj.trip_distance is None:
            return None
        return round(obj.trip_distance, 2)
