from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyClockedInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..geofence.model import Coordinates
from .model import PresenceRecord
from .repository import PresenceRepository

_COLUMNS = """
    p.presence_id, p.user_id, p.work_date, p.clock_in, p.clock_out,
    p.lat_in, p.lng_in, p.lat_out, p.lng_out, p.status
"""


def _to_record(row: dict) -> PresenceRecord:
    location_out = None
    if row.get("lat_out") is not None and row.get("lng_out") is not None:
        location_out = Coordinates(float(row["lat_out"]), float(row["lng_out"]))

    return PresenceRecord(
        presence_id=int(row["presence_id"]),
        user_id=int(row["user_id"]),
        work_date=row["work_date"],
        clock_in=row["clock_in"],
        clock_out=row.get("clock_out"),
        location_in=Coordinates(float(row["lat_in"]), float(row["lng_in"])),
        location_out=location_out,
        status=AttendanceStatus(row["status"]),
        user_name=row.get("user_name"),
        user_email=row.get("user_email"),
    )


class MySQLPresenceRepository(PresenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, presence_id: int) -> Optional[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM presences p WHERE p.presence_id=%s", (presence_id,))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM presences p WHERE p.user_id=%s AND p.work_date=%s",
                (user_id, work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in: datetime,
        location_in: Coordinates,
        status: AttendanceStatus,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO presences(user_id, work_date, clock_in, lat_in, lng_in, status)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (user_id, work_date, clock_in, location_in.lat, location_in.lng, status.value),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise AlreadyClockedInError() from exc
            raise

    def update_clock_out(self, *, presence_id: int, clock_out: datetime, location_out: Coordinates) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE presences
                SET clock_out=%s, lat_out=%s, lng_out=%s
                WHERE presence_id=%s AND clock_out IS NULL
                """,
                (clock_out, location_out.lat, location_out.lng, presence_id),
            )
            return cur.rowcount > 0

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM presences p
                WHERE p.user_id=%s AND p.work_date BETWEEN %s AND %s
                ORDER BY p.work_date ASC
                """,
                (user_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_page(
        self,
        page: PageRequest,
        *,
        user_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Page[PresenceRecord]:
        where = ["1=1"]
        params: list = []
        if user_id is not None:
            where.append("p.user_id=%s")
            params.append(user_id)
        if status is not None:
            where.append("p.status=%s")
            params.append(status.value)
        if start is not None:
            where.append("p.work_date >= %s")
            params.append(start)
        if end is not None:
            where.append("p.work_date <= %s")
            params.append(end)
        clause = " AND ".join(where)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM presences p WHERE {clause}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.name AS user_name, u.email AS user_email
                FROM presences p
                JOIN users u ON u.user_id = p.user_id
                WHERE {clause}
                ORDER BY p.work_date DESC, p.presence_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return Page(items=[_to_record(r) for r in fetchall(cur)], total=total, request=page)

    def list_for_date(
        self,
        work_date: date,
        *,
        status: Optional[AttendanceStatus] = None,
        open_only: bool = False,
    ) -> Sequence[PresenceRecord]:
        where = ["p.work_date=%s"]
        params: list = [work_date]
        if status is not None:
            where.append("p.status=%s")
            params.append(status.value)
        if open_only:
            where.append("p.clock_out IS NULL")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.name AS user_name, u.email AS user_email
                FROM presences p
                JOIN users u ON u.user_id = p.user_id
                WHERE {" AND ".join(where)}
                ORDER BY p.clock_in ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_between(self, start: date, end: date, *, status: Optional[AttendanceStatus] = None) -> int:
        sql = "SELECT COUNT(*) AS total FROM presences WHERE work_date BETWEEN %s AND %s"
        params: list = [start, end]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(fetchone(cur)["total"])
