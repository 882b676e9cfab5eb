"""Signed JWT credentials (PyJWT, HS256).

Access and refresh tokens share one claim shape but are signed with different
secrets, so a refresh token can never pass as an access token and vice versa.
Expiry is checked against the injected clock rather than the wall clock.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

import jwt

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ACCESS_TOKEN_MINUTES, DEFAULT_REFRESH_TOKEN_DAYS, JWT_ALGORITHM
from ..core.enums import TokenType
from ..core.exceptions import AuthenticationError, InvalidRefreshTokenError, TokenExpiredError
from .model import TokenClaims

_DECODE_OPTIONS = {"verify_exp": False, "verify_iat": False, "require": ["exp", "sub", "type"]}


class TokenCodec:
    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=DEFAULT_ACCESS_TOKEN_MINUTES),
        refresh_ttl: timedelta = timedelta(days=DEFAULT_REFRESH_TOKEN_DAYS),
        clock: Callable[[], datetime] = now_local,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Token secrets must be configured")
        self._secrets = {TokenType.ACCESS: access_secret, TokenType.REFRESH: refresh_secret}
        self._ttls = {TokenType.ACCESS: access_ttl, TokenType.REFRESH: refresh_ttl}
        self._clock = clock

    @property
    def access_ttl(self) -> timedelta:
        return self._ttls[TokenType.ACCESS]

    @property
    def refresh_ttl(self) -> timedelta:
        return self._ttls[TokenType.REFRESH]

    def _encode(self, kind: TokenType, *, user_id: int, role: str, now: datetime) -> str:
        issued = int(now.timestamp())
        payload = {
            "sub": str(user_id),
            "role": role,
            "type": kind.value,
            "jti": uuid.uuid4().hex,
            "iat": issued,
            "exp": issued + int(self._ttls[kind].total_seconds()),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=JWT_ALGORITHM)

    def _decode(self, kind: TokenType, token: str, now: Optional[datetime]) -> TokenClaims:
        data = jwt.decode(token, self._secrets[kind], algorithms=[JWT_ALGORITHM], options=_DECODE_OPTIONS)
        if data.get("type") != kind.value:
            raise jwt.InvalidTokenError("wrong token type")
        if int(data["exp"]) <= (now or self._clock()).timestamp():
            raise jwt.ExpiredSignatureError("token expired")
        return TokenClaims(user_id=int(data["sub"]), role=str(data.get("role", "")), type=data["type"])

    def issue_access(self, *, user_id: int, role: str, now: datetime) -> str:
        return self._encode(TokenType.ACCESS, user_id=user_id, role=role, now=now)

    def issue_refresh(self, *, user_id: int, role: str, now: datetime) -> str:
        return self._encode(TokenType.REFRESH, user_id=user_id, role=role, now=now)

    def verify_access(self, token: str, *, now: Optional[datetime] = None) -> TokenClaims:
        if not token:
            raise AuthenticationError("Access token is required")
        try:
            return self._decode(TokenType.ACCESS, token, now)
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except (jwt.InvalidTokenError, KeyError, ValueError):
            raise AuthenticationError("Invalid access token")

    def verify_refresh(self, token: str, *, now: Optional[datetime] = None) -> TokenClaims:
        # Every failure looks the same to the caller.
        if not token:
            raise InvalidRefreshTokenError()
        try:
            return self._decode(TokenType.REFRESH, token, now)
        except (jwt.InvalidTokenError, KeyError, ValueError):
            raise InvalidRefreshTokenError()
