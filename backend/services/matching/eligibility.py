"""
Rider eligibility gates.

A rider may be offered an order only when every gate passes. The DB
helpers here are also used by order acceptance to re-validate the rider.
"""

from typing import Optional

from django.db.models import Q

from riders.models import MaintenanceLog
from .candidates import MatchingCriteria, RiderCandidate
from .vehicles import vehicle_allows_trip


def critical_maintenance_q(prefix: str = "") -> Q:
    """Q matching MaintenanceLog rows that block a rider."""
    return (
        Q(**{f"{prefix}status": MaintenanceLog.STATUS_CRITICO})
        | Q(**{f"{prefix}wear_percentage__gte": MaintenanceLog.CRITICAL_WEAR})
    )


def has_critical_maintenance(user_id: int) -> bool:
    return MaintenanceLog.objects.filter(user_id=user_id).filter(critical_maintenance_q()).exists()


def is_blocked_by_maintenance(rider) -> bool:
    """True when the rider has a critical maintenance record and no admin override."""
    profile = getattr(rider, "rider_profile", None)
    if profile is not None and profile.maintenance_block_override:
        return False
    return has_critical_maintenance(rider.id)


def exclusion_reason(candidate: RiderCandidate, criteria: MatchingCriteria) -> Optional[str]:
    """Return why the candidate is excluded, or None when eligible."""
    if not candidate.is_online or not candidate.has_location:
        return "offline"
    if candidate.distance > criteria.radius:
        return "out_of_radius"
    if candidate.blocked_by_maintenance:
        return "maintenance"

    trip_distance = candidate.trip_distance
    if trip_distance is not None and not vehicle_allows_trip(candidate.vehicle_type, trip_distance):
        return "vehicle_range"

    return None


def is_eligible(candidate: RiderCandidate, criteria: MatchingCriteria) -> bool:
    return exclusion_reason(candidate, criteria) is None
