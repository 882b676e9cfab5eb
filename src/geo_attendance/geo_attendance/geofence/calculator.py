"""Great-circle distance math for geofence checks."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..core.constants import EARTH_RADIUS_METERS
from ..common.numbers import round_int
from .model import Coordinates, GeofenceCheck, OfficeLocation


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> int:
    """Distance in meters between two points, rounded to the nearest meter."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round_int(EARTH_RADIUS_METERS * c)


def check_office(office: OfficeLocation, point: Coordinates) -> GeofenceCheck:
    return GeofenceCheck(office=office, distance=haversine_distance(point.lat, point.lng, office.lat, office.lng))


def resolve_geofence(offices: Sequence[OfficeLocation], point: Coordinates) -> Optional[GeofenceCheck]:
    """Check ``point`` against every office.

    Returns the nearest office whose radius contains the point; when none does,
    the nearest office overall (``within`` is then False). ``None`` when there
    are no offices.
    """
    checks = sorted((check_office(o, point) for o in offices), key=lambda c: (c.distance, c.office.location_id))
    if not checks:
        return None
    for check in checks:
        if check.within:
            return check
    return checks[0]
