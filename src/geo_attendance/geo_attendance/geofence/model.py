from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.constants import DEFAULT_OFFICE_RADIUS


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class OfficeLocation:
    """Domain entity: a named geofence center with a radius in meters."""

    location_id: int
    name: str
    lat: float
    lng: float
    radius: int = DEFAULT_OFFICE_RADIUS
    created_at: Optional[datetime] = None

    @property
    def center(self) -> Coordinates:
        return Coordinates(self.lat, self.lng)

    def to_dict(self) -> dict:
        return {
            "id": self.location_id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "radius": self.radius,
            "createdAt": to_iso(self.created_at),
        }


@dataclass(frozen=True)
class GeofenceCheck:
    """Outcome of checking a point against an office geofence."""

    office: OfficeLocation
    distance: int

    @property
    def within(self) -> bool:
        return self.distance <= self.office.radius

    def to_dict(self) -> dict:
        return {
            "isWithinRadius": self.within,
            "distance": self.distance,
            "officeLocation": {"name": self.office.name, "radius": self.office.radius},
        }
