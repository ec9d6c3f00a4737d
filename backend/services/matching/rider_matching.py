"""
Build the ordered rider candidate list for a delivery.

Loads online riders with a live location, computes distances from the
store, drops ineligible riders and ranks the rest (see ranking.py).
Reads are not locked: acceptance re-validates rider and order state.
"""

import logging
from typing import List

from django.db.models import Avg, Count, Exists, FloatField, IntegerField, OuterRef, Subquery, Value
from django.db.models.functions import Coalesce

from deliveries.models import DeliveryOrder, Rating
from riders.models import Bike, MaintenanceLog, RiderProfile
from common.utils import find_nearby
from .candidates import MatchingCriteria, RiderCandidate
from .eligibility import critical_maintenance_q, exclusion_reason
from .ranking import rank_candidates
from .vehicles import estimate_minutes, normalize_vehicle_type

logger = logging.getLogger(__name__)


def _available_riders():
    """Online rider profiles with a stored location, annotated for ranking."""
    average_rating = (
        Rating.objects.filter(rider_id=OuterRef("user_id"), delivery_order__isnull=False)
        .order_by()
        .values("rider_id")
        .annotate(value=Avg("rating"))
        .values("value")[:1]
    )
    active_orders = (
        DeliveryOrder.objects.filter(rider_id=OuterRef("user_id"), status__in=DeliveryOrder.ACTIVE_STATUSES)
        .order_by()
        .values("rider_id")
        .annotate(value=Count("id"))
        .values("value")[:1]
    )
    latest_vehicle = (
        Bike.objects.filter(user_id=OuterRef("user_id"))
        .order_by("-created_at", "-id")
        .values("vehicle_type")[:1]
    )
    critical_maintenance = MaintenanceLog.objects.filter(user_id=OuterRef("user_id")).filter(
        critical_maintenance_q()
    )

    return (
        RiderProfile.objects.select_related("user")
        .filter(
            is_online=True,
            current_latitude__isnull=False,
            current_longitude__isnull=False,
        )
        .annotate(
            average_rating=Coalesce(
                Subquery(average_rating, output_field=FloatField()), Value(0.0), output_field=FloatField()
            ),
            active_orders=Coalesce(
                Subquery(active_orders, output_field=IntegerField()), Value(0), output_field=IntegerField()
            ),
            vehicle_type=Subquery(latest_vehicle),
            has_critical_maintenance=Exists(critical_maintenance),
        )
    )


def _build_candidate(profile: RiderProfile, distance: float, criteria: MatchingCriteria) -> RiderCandidate:
    user = profile.user
    vehicle_type = normalize_vehicle_type(profile.vehicle_type)
    trip_distance = criteria.trip_distance

    # Time to reach the store, plus the trip itself when known
    travel = distance + (trip_distance or 0.0)

    return RiderCandidate(
        rider_id=user.id,
        name=user.display_name,
        email=user.email,
        distance=distance,
        trip_distance=trip_distance,
        vehicle_type=vehicle_type,
        estimated_time=estimate_minutes(travel, vehicle_type),
        is_premium=user.is_premium,
        average_rating=float(profile.average_rating or 0.0),
        active_orders=profile.active_orders or 0,
        current_latitude=float(profile.current_latitude),
        current_longitude=float(profile.current_longitude),
        verification_badge=user.verification_badge,
        is_online=profile.is_online,
        blocked_by_maintenance=(
            profile.has_critical_maintenance and not profile.maintenance_block_override
        ),
    )


def find_matching_riders(criteria: MatchingCriteria) -> List[RiderCandidate]:
    """
    Return eligible riders for a pickup, most-preferred first.

    Args:
        criteria: Store location, search radius (km) and optional trip geometry

    Returns:
        List of RiderCandidate instances in ranking order
    """
    nearby = find_nearby(
        _available_riders(),
        criteria.latitude,
        criteria.longitude,
        criteria.radius,
    )

    candidates: List[RiderCandidate] = []
    for profile, distance in nearby:
        candidate = _build_candidate(profile, distance, criteria)
        reason = exclusion_reason(candidate, criteria)
        if reason:
            logger.debug("Rider %s excluded from matching: %s", candidate.rider_id, reason)
            continue
        candidates.append(candidate)

    ranked = rank_candidates(candidates, has_trip=criteria.has_trip)

    logger.info(
        "Matched %d riders near (%s, %s) radius=%skm",
        len(ranked), criteria.latitude, criteria.longitude, criteria.radius
    )
    return ranked
