from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import DeviceInfo, PasswordResetCode, RefreshToken


class RefreshTokenRepository(Protocol):
    def create(self, *, user_id: int, token: str, expires_at: datetime, device: DeviceInfo) -> int:
        raise NotImplementedError

    def find_active(self, *, token: str, user_id: int, now: datetime) -> Optional[RefreshToken]:
        """Active row for exactly this token and user whose expiry is still ahead."""

        raise NotImplementedError

    def deactivate(self, token: str) -> bool:
        raise NotImplementedError

    def deactivate_all_for_user(self, user_id: int, *, except_token: Optional[str] = None) -> int:
        raise NotImplementedError

    def purge_expired(self, *, now: datetime) -> int:
        raise NotImplementedError


class PasswordResetRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        email: str,
        code: str,
        expires_at: datetime,
        device: DeviceInfo,
    ) -> int:
        raise NotImplementedError

    def find_unused(self, *, email: str, code: str) -> Optional[PasswordResetCode]:
        raise NotImplementedError

    def mark_used(self, code_id: int) -> bool:
        """Flip is_used only if still unused; False when the code was already consumed."""

        raise NotImplementedError

    def purge_expired(self, *, now: datetime) -> int:
        raise NotImplementedError
