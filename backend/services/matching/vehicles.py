"""Vehicle-type rules shared by matching and order acceptance."""

import math
from typing import Optional

from riders.models import Bike

# Average speeds used for ETA estimates
VEHICLE_SPEED_KMH = {
    Bike.BICYCLE: 15,
    Bike.MOTORCYCLE: 30,
}

# Longest trip (store -> destination) each vehicle type may take
MAX_TRIP_KM = {
    Bike.BICYCLE: 3,
    Bike.MOTORCYCLE: 10,
}

DEFAULT_VEHICLE_TYPE = Bike.MOTORCYCLE


def normalize_vehicle_type(vehicle_type: Optional[str]) -> str:
    return vehicle_type if vehicle_type in VEHICLE_SPEED_KMH else DEFAULT_VEHICLE_TYPE


def get_current_vehicle_type(user_id: int) -> str:
    """Vehicle type of the rider's most recently added bike (MOTORCYCLE if none)."""
    vehicle_type = (
        Bike.objects.filter(user_id=user_id)
        .order_by('-created_at', '-id')
        .values_list('vehicle_type', flat=True)
        .first()
    )
    return normalize_vehicle_type(vehicle_type)


def estimate_minutes(distance_km: float, vehicle_type: str) -> int:
    """Travel time in whole minutes, rounded half up."""
    speed = VEHICLE_SPEED_KMH[normalize_vehicle_type(vehicle_type)]
    return int(math.floor(distance_km / speed * 60 + 0.5))


def vehicle_allows_trip(vehicle_type: str, trip_distance: float) -> bool:
    return trip_distance <= MAX_TRIP_KM[normalize_vehicle_type(vehicle_type)]


def is_vehicle_suitable(vehicle_type: str, trip_distance: float) -> bool:
    """Bicycles suit short hops only; motorcycles suit any trip."""
    if normalize_vehicle_type(vehicle_type) == Bike.BICYCLE:
        return trip_distance <= MAX_TRIP_KM[Bike.BICYCLE]
    return True
