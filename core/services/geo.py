"""Great-circle distance helpers."""

from __future__ import annotations

import math

from core.models import GeoPoint

# Mean Earth radius (IUGG), meters
EARTH_RADIUS_M = 6_371_008.8


def distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Return the haversine distance between `a` and `b` in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Clamp against rounding just above 1.0 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def offset_north(point: GeoPoint, meters: float) -> GeoPoint:
    """Return the point `meters` due north of `point` on the same sphere."""
    dlat = math.degrees(meters / EARTH_RADIUS_M)
    return GeoPoint(point.latitude + dlat, point.longitude)
