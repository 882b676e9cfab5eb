from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import OfficeLocation
from .repository import OfficeLocationRepository

_COLUMNS = "location_id, name, lat, lng, radius, created_at"


def _to_office(row: dict) -> OfficeLocation:
    return OfficeLocation(
        location_id=int(row["location_id"]),
        name=row["name"],
        lat=float(row["lat"]),
        lng=float(row["lng"]),
        radius=int(row["radius"]),
        created_at=row.get("created_at"),
    )


class MySQLOfficeLocationRepository(OfficeLocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM office_locations ORDER BY location_id")
            return [_to_office(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM office_locations WHERE location_id=%s", (location_id,))
            row = fetchone(cur)
            return _to_office(row) if row else None

    def create(self, *, name: str, lat: float, lng: float, radius: int) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO office_locations(name, lat, lng, radius) VALUES(%s,%s,%s,%s)",
                    (name, lat, lng, radius),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ConflictError("An office location with this name already exists") from exc
            raise

    def update(self, location_id: int, *, name: str, lat: float, lng: float, radius: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE office_locations SET name=%s, lat=%s, lng=%s, radius=%s WHERE location_id=%s",
                    (name, lat, lng, radius, location_id),
                )
                return cur.rowcount > 0
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ConflictError("An office location with this name already exists") from exc
            raise

    def delete(self, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM office_locations WHERE location_id=%s", (location_id,))
            return cur.rowcount > 0
