"""
Ranking of eligible riders.

Keys, most significant first:
    1. active premium subscriber
    2. (trip known) vehicle suitability, then ETA when it differs by more than 2 minutes
    3. distance to store when it differs by more than 0.1 km
    4. average rating, higher first
"""

from functools import cmp_to_key
from typing import List

from .candidates import RiderCandidate
from .vehicles import is_vehicle_suitable

ETA_TIE_MINUTES = 2
DISTANCE_TIE_KM = 0.1


def compare_candidates(a: RiderCandidate, b: RiderCandidate, has_trip: bool = False) -> int:
    """Negative when `a` should be offered the order before `b`."""
    if a.is_premium != b.is_premium:
        return -1 if a.is_premium else 1

    if has_trip:
        a_suitable = is_vehicle_suitable(a.vehicle_type, a.trip_distance)
        b_suitable = is_vehicle_suitable(b.vehicle_type, b.trip_distance)
        if a_suitable != b_suitable:
            return -1 if a_suitable else 1
        if abs(a.estimated_time - b.estimated_time) > ETA_TIE_MINUTES:
            return -1 if a.estimated_time < b.estimated_time else 1

    if abs(a.distance - b.distance) > DISTANCE_TIE_KM:
        return -1 if a.distance < b.distance else 1

    a_rating = a.average_rating or 0
    b_rating = b.average_rating or 0
    if a_rating != b_rating:
        return -1 if a_rating > b_rating else 1

    return 0


def rank_candidates(candidates: List[RiderCandidate], has_trip: bool = False) -> List[RiderCandidate]:
    """Return candidates sorted most-preferred first (stable for full ties)."""
    return sorted(
        candidates,
        key=cmp_to_key(lambda a, b: compare_candidates(a, b, has_trip)),
    )
