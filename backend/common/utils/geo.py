"""
Geographic utility functions.

This module provides core geospatial calculations used throughout the application.
"""

from math import radians, cos, sin, atan2, sqrt
from typing import Any, Callable, Iterable, List, Optional, Tuple

EARTH_RADIUS_KM = 6371.0


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate distance between two points in kilometers using Haversine formula.

    Args:
        lat1: Latitude of first point
        lng1: Longitude of first point
        lat2: Latitude of second point
        lng2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    lat1, lng1, lat2, lng2 = map(radians, [float(lat1), float(lng1), float(lat2), float(lng2)])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def find_nearby(
    items: Iterable[Any],
    latitude: float,
    longitude: float,
    radius: float = 5,
    location: Optional[Callable[[Any], Tuple[Optional[float], Optional[float]]]] = None,
) -> List[Tuple[Any, float]]:
    """
    Return (item, distance_km) pairs within `radius` km of a point, closest first.

    `location` extracts (lat, lng) from an item; items without a known
    location are skipped.
    """
    location = location or (lambda item: (item.current_latitude, item.current_longitude))

    nearby = []
    for item in items:
        lat, lng = location(item)
        if lat is None or lng is None:
            continue
        distance = calculate_distance(latitude, longitude, lat, lng)
        if distance <= radius:
            nearby.append((item, distance))

    nearby.sort(key=lambda pair: pair[1])
    return nearby
