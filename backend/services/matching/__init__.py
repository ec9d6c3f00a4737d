"""
Rider matching service.

This module handles:
    - Eligibility gates (online, location, radius, maintenance, vehicle range)
    - Ranking eligible riders (premium, vehicle/ETA, proximity, reputation)
    - Building the ordered candidate list for a pickup
"""

from .candidates import MatchingCriteria, RiderCandidate
from .eligibility import is_eligible, is_blocked_by_maintenance, has_critical_maintenance
from .ranking import compare_candidates, rank_candidates
from .rider_matching import find_matching_riders
from .vehicles import estimate_minutes, get_current_vehicle_type

__all__ = [
    "MatchingCriteria",
    "RiderCandidate",
    "is_eligible",
    "is_blocked_by_maintenance",
    "has_critical_maintenance",
    "compare_candidates",
    "rank_candidates",
    "find_matching_riders",
    "estimate_minutes",
    "get_current_vehicle_type",
]
