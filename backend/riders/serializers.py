from rest_framework import serializers


class RiderStatusSerializer(serializers.Serializer):
    """
    Serializer for updating rider availability.
    """
    is_online = serializers.BooleanField()


class LocationUpdateSerializer(serializers.Serializer):
    """
    Serializer for updating rider GPS location.
    """
    latitude = serializers.DecimalField(max_digits=10, decimal_places=6, min_value=-90, max_value=90)
    longitude = serializers.DecimalField(max_digits=10, decimal_places=6, min_value=-180, max_value=180)
