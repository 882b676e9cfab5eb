from __future__ import annotations

from flask import Flask

from ..auth.decorators import build_guards
from ..common.responses import json_body, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    geofence = container.geofence_service

    @app.route("/api/office-location", methods=["GET"], endpoint="office_list")
    @guards.login_required
    def list_offices():
        return success("Success", {"officeLocations": [o.to_dict() for o in geofence.list_offices()]})

    @app.route("/api/office-location/<int:location_id>", methods=["GET"], endpoint="office_get")
    @guards.login_required
    def get_office(location_id: int):
        return success("Success", {"officeLocation": geofence.get_office(location_id).to_dict()})

    @app.route("/api/office-location", methods=["POST"], endpoint="office_create")
    @guards.admin_required
    def create_office():
        body = json_body()
        office = geofence.create_office(
            name=body.get("name"),
            lat=body.get("lat"),
            lng=body.get("lng"),
            radius=body.get("radius"),
        )
        return success("Office location created", {"officeLocation": office.to_dict()}, 201)

    @app.route("/api/office-location/<int:location_id>", methods=["PUT"], endpoint="office_update")
    @guards.admin_required
    def update_office(location_id: int):
        body = json_body()
        office = geofence.update_office(
            location_id,
            name=body.get("name"),
            lat=body.get("lat"),
            lng=body.get("lng"),
            radius=body.get("radius"),
        )
        return success("Office location updated", {"officeLocation": office.to_dict()})

    @app.route("/api/office-location/<int:location_id>", methods=["DELETE"], endpoint="office_delete")
    @guards.admin_required
    def delete_office(location_id: int):
        geofence.delete_office(location_id)
        return success("Office location deleted")

    @app.route("/api/office-location/validate", methods=["POST"], endpoint="office_validate")
    @guards.login_required
    def validate_location():
        body = json_body()
        result = geofence.check(body.get("lat"), body.get("lng"))
        return success("Success", result.to_dict())
