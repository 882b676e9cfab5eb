from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import require_coordinates, require_non_empty, require_radius
from ..core.constants import DEFAULT_OFFICE_RADIUS
from ..core.exceptions import GeofenceNotConfiguredError, NotFoundError, OutsideGeofenceError
from .calculator import resolve_geofence
from .model import Coordinates, GeofenceCheck, OfficeLocation
from .repository import OfficeLocationRepository

logger = logging.getLogger(__name__)


class GeofenceService:
    """Office-location management and the geofence check used by attendance."""

    def __init__(self, offices: OfficeLocationRepository):
        self._offices = offices

    def check(self, lat: Any, lng: Any) -> GeofenceCheck:
        """Check coordinates against the configured offices (nearest containing office wins)."""
        point = Coordinates(*require_coordinates(lat, lng))
        result = resolve_geofence(self._offices.list_all(), point)
        if result is None:
            raise GeofenceNotConfiguredError()
        return result

    def require_within(self, lat: Any, lng: Any) -> GeofenceCheck:
        result = self.check(lat, lng)
        if not result.within:
            raise OutsideGeofenceError(result.distance)
        return result

    # Admin CRUD -------------------------------------------------------------

    def list_offices(self) -> Sequence[OfficeLocation]:
        return self._offices.list_all()

    def get_office(self, location_id: int) -> OfficeLocation:
        office = self._offices.get_by_id(location_id)
        if not office:
            raise NotFoundError("Office location not found")
        return office

    def create_office(self, *, name: Any, lat: Any, lng: Any, radius: Any = None) -> OfficeLocation:
        name = require_non_empty(name, "Name")
        lat_f, lng_f = require_coordinates(lat, lng)
        radius_m = DEFAULT_OFFICE_RADIUS if radius is None else require_radius(radius)

        location_id = self._offices.create(name=name, lat=lat_f, lng=lng_f, radius=radius_m)
        logger.info("office location created id=%s name=%s radius=%s", location_id, name, radius_m)
        return self.get_office(location_id)

    def update_office(
        self,
        location_id: int,
        *,
        name: Optional[Any] = None,
        lat: Optional[Any] = None,
        lng: Optional[Any] = None,
        radius: Optional[Any] = None,
    ) -> OfficeLocation:
        office = self.get_office(location_id)

        new_name = require_non_empty(name, "Name") if name is not None else office.name
        new_lat, new_lng = require_coordinates(
            office.lat if lat is None else lat,
            office.lng if lng is None else lng,
        )
        new_radius = office.radius if radius is None else require_radius(radius)

        self._offices.update(location_id, name=new_name, lat=new_lat, lng=new_lng, radius=new_radius)
        logger.info("office location updated id=%s", location_id)
        return self.get_office(location_id)

    def delete_office(self, location_id: int) -> None:
        self.get_office(location_id)
        self._offices.delete(location_id)
        logger.info("office location deleted id=%s", location_id)
