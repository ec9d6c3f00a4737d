from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from riders.models import RiderProfile
from riders.permissions import IsRider
from riders.serializers import RiderStatusSerializer, LocationUpdateSerializer

from riders import services
from services.order_management import RiderNotFoundError


def get_profile(user, create=False):
    # Riders registered through the API always have one; admin-created users get theirs on first write
    if create:
        profile, _ = RiderProfile.objects.get_or_create(user=user)
        return profile
    try:
        return RiderProfile.objects.get(user=user)
    except RiderProfile.DoesNotExist:
        raise RiderNotFoundError("Rider profile not found")


class RiderStatusView(APIView):
    permission_classes = [IsAuthenticated, IsRider]

    def get(self, request):
        profile = get_profile(request.user)
        return Response({"is_online": profile.is_online})

    def put(self, request):
        profile = get_profile(request.user, create=True)

        serializer = RiderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_online = serializer.validated_data["is_online"]

        services.set_online(profile, is_online)

        return Response({
            "message": f"Rider is now {'online' if is_online else 'offline'}",
            "is_online": is_online,
        })


class RiderLocationView(APIView):
    permission_classes = [IsAuthenticated, IsRider]

    def get(self, request):
        profile = get_profile(request.user)

        return Response({
            "latitude": float(profile.current_latitude) if profile.has_location else None,
            "longitude": float(profile.current_longitude) if profile.has_location else None,
            "last_updated": profile.last_location_update,
            "is_online": profile.is_online,
        })

    def post(self, request):
        profile = get_profile(request.user, create=True)

        serializer = LocationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        lat = serializer.validated_data["latitude"]
        lon = serializer.validated_data["longitude"]

        services.update_rider_location(profile, lat, lon)

        return Response({
            "message": "Location updated",
            "latitude": float(lat),
            "longitude": float(lon),
            "is_online": profile.is_online,
        })
