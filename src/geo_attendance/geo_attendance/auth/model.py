from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..users.model import User


@dataclass(frozen=True)
class DeviceInfo:
    user_agent: str = ""
    ip: str = ""

    @property
    def device_type(self) -> str:
        ua = self.user_agent.lower()
        if "mobile" in ua or "android" in ua or "iphone" in ua:
            return "mobile"
        if "tablet" in ua or "ipad" in ua:
            return "tablet"
        return "desktop"


@dataclass(frozen=True)
class RefreshToken:
    """Stored refresh credential; valid iff active and not yet expired."""

    token_id: int
    user_id: int
    token: str
    expires_at: datetime
    is_active: bool = True
    user_agent: str = ""
    ip: str = ""
    device_type: str = ""
    created_at: Optional[datetime] = None

    def is_valid(self, now: datetime) -> bool:
        return self.is_active and self.expires_at > now


@dataclass(frozen=True)
class PasswordResetCode:
    code_id: int
    user_id: int
    email: str
    code: str
    expires_at: datetime
    is_used: bool = False
    ip_address: str = ""
    user_agent: str = ""
    created_at: Optional[datetime] = None

    def is_valid(self, now: datetime) -> bool:
        return not self.is_used and self.expires_at > now


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: str
    type: str


@dataclass(frozen=True)
class AuthResult:
    user: "User"
    tokens: TokenPair

    def to_dict(self) -> dict:
        return {"user": self.user.to_public(), **self.tokens.to_dict()}
