import pytest

from src.geo_attendance.geo_attendance.core.exceptions import (
    GeofenceNotConfiguredError,
    NotFoundError,
    OutsideGeofenceError,
    ValidationError,
)
from src.geo_attendance.geo_attendance.geofence.service import GeofenceService
from tests.fakes import InMemoryOffices


def test_check_without_offices_is_configuration_error():
    svc = GeofenceService(InMemoryOffices())

    with pytest.raises(GeofenceNotConfiguredError) as exc:
        svc.check(-6.2, 106.816666)
    assert exc.value.status_code == 400


def test_require_within_reports_distance(office):
    svc = GeofenceService(InMemoryOffices([office]))

    with pytest.raises(OutsideGeofenceError) as exc:
        svc.require_within(-6.198651, 106.816666)

    assert abs(exc.value.distance - 150) <= 1
    assert "m from the office" in exc.value.message


@pytest.mark.parametrize("lat, lng", [(91, 0), (0, -181), ("1", 0), (True, 0), (float("nan"), 0)])
def test_invalid_coordinates_rejected(office, lat, lng):
    svc = GeofenceService(InMemoryOffices([office]))

    with pytest.raises(ValidationError):
        svc.check(lat, lng)


def test_office_crud_defaults_and_bounds():
    svc = GeofenceService(InMemoryOffices())

    created = svc.create_office(name="HQ", lat=1.0, lng=2.0)
    assert created.radius == 100

    updated = svc.update_office(created.location_id, radius=250)
    assert updated.radius == 250
    assert updated.lat == 1.0

    with pytest.raises(ValidationError):
        svc.update_office(created.location_id, radius=5)

    svc.delete_office(created.location_id)
    with pytest.raises(NotFoundError):
        svc.get_office(created.location_id)
