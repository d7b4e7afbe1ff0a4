"""
Great-circle distance helpers.

Used to annotate itinerary stops with their distance from the caller and to
find places around a point.
"""

import math
from typing import NamedTuple

# Radius of Earth in kilometers
EARTH_RADIUS_KM = 6371.0


class GeoPoint(NamedTuple):
    """A latitude/longitude pair in degrees."""
    latitude: float
    longitude: float


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    NaN inputs are not rejected; they propagate to the result.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Rounding can push a just past 1 for near-antipodal points; NaN passes through
    if a > 1.0:
        a = 1.0
    elif a < 0.0:
        a = 0.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    """Distance in kilometers between two GeoPoints."""
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)
