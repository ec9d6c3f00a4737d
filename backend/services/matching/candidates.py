"""Value objects passed between the matching stages."""

from dataclasses import dataclass
from typing import Optional

from common.utils import calculate_distance


@dataclass
class MatchingCriteria:
    """Where to look for riders, and the trip when it is known."""
    latitude: float
    longitude: float
    radius: float = 5
    store_latitude: Optional[float] = None
    store_longitude: Optional[float] = None
    delivery_latitude: Optional[float] = None
    delivery_longitude: Optional[float] = None

    @property
    def has_trip(self) -> bool:
        return None not in (
            self.store_latitude,
            self.store_longitude,
            self.delivery_latitude,
            self.delivery_longitude,
        )

    @property
    def trip_distance(self) -> Optional[float]:
        if not self.has_trip:
            return None
        return calculate_distance(
            self.store_latitude,
            self.store_longitude,
            self.delivery_latitude,
            self.delivery_longitude,
        )


@dataclass
class RiderCandidate:
    """One rider as seen by the eligibility filter and ranking engine."""
    rider_id: int
    name: str
    email: str
    distance: float
    vehicle_type: str
    estimated_time: int
    is_premium: bool = False
    average_rating: float = 0.0
    active_orders: int = 0
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    verification_badge: bool = False
    trip_distance: Optional[float] = None
    is_online: bool = True
    blocked_by_maintenance: bool = False

    @property
    def has_location(self) -> bool:
        return self.current_latitude is not None and self.current_longitude is not None
