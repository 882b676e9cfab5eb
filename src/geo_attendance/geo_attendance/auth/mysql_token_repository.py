from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import DeviceInfo, PasswordResetCode, RefreshToken
from .repository import PasswordResetRepository, RefreshTokenRepository


def _to_refresh(row: dict) -> RefreshToken:
    return RefreshToken(
        token_id=int(row["token_id"]),
        user_id=int(row["user_id"]),
        token=row["token"],
        expires_at=row["expires_at"],
        is_active=bool(row["is_active"]),
        user_agent=row.get("user_agent") or "",
        ip=row.get("ip") or "",
        device_type=row.get("device_type") or "",
        created_at=row.get("created_at"),
    )


def _to_reset(row: dict) -> PasswordResetCode:
    return PasswordResetCode(
        code_id=int(row["code_id"]),
        user_id=int(row["user_id"]),
        email=row["email"],
        code=row["code"],
        expires_at=row["expires_at"],
        is_used=bool(row["is_used"]),
        ip_address=row.get("ip_address") or "",
        user_agent=row.get("user_agent") or "",
        created_at=row.get("created_at"),
    )


class MySQLRefreshTokenRepository(RefreshTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, token: str, expires_at: datetime, device: DeviceInfo) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO refresh_tokens(user_id, token, expires_at, is_active, user_agent, ip, device_type)
                VALUES(%s,%s,%s,1,%s,%s,%s)
                """,
                (user_id, token, expires_at, device.user_agent[:255], device.ip[:45], device.device_type),
            )
            return int(cur.lastrowid)

    def find_active(self, *, token: str, user_id: int, now: datetime) -> Optional[RefreshToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT token_id, user_id, token, expires_at, is_active, user_agent, ip, device_type, created_at
                FROM refresh_tokens
                WHERE token=%s AND user_id=%s AND is_active=1 AND expires_at > %s
                """,
                (token, user_id, now),
            )
            row = fetchone(cur)
            return _to_refresh(row) if row else None

    def deactivate(self, token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE refresh_tokens SET is_active=0 WHERE token=%s AND is_active=1", (token,))
            return cur.rowcount > 0

    def deactivate_all_for_user(self, user_id: int, *, except_token: Optional[str] = None) -> int:
        sql = "UPDATE refresh_tokens SET is_active=0 WHERE user_id=%s AND is_active=1"
        params: list = [user_id]
        if except_token:
            sql += " AND token<>%s"
            params.append(except_token)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(cur.rowcount)

    def purge_expired(self, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM refresh_tokens WHERE expires_at <= %s", (now,))
            return int(cur.rowcount)


class MySQLPasswordResetRepository(PasswordResetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        email: str,
        code: str,
        expires_at: datetime,
        device: DeviceInfo,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO password_resets(user_id, email, code, expires_at, is_used, ip_address, user_agent)
                VALUES(%s,%s,%s,%s,0,%s,%s)
                """,
                (user_id, email, code, expires_at, device.ip[:45], device.user_agent[:255]),
            )
            return int(cur.lastrowid)

    def find_unused(self, *, email: str, code: str) -> Optional[PasswordResetCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT code_id, user_id, email, code, expires_at, is_used, ip_address, user_agent, created_at
                FROM password_resets
                WHERE email=%s AND code=%s AND is_used=0
                ORDER BY code_id DESC
                LIMIT 1
                """,
                (email, code),
            )
            row = fetchone(cur)
            return _to_reset(row) if row else None

    def mark_used(self, code_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE password_resets SET is_used=1 WHERE code_id=%s AND is_used=0", (code_id,))
            return cur.rowcount > 0

    def purge_expired(self, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM password_resets WHERE expires_at <= %s", (now,))
            return int(cur.rowcount)
