from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, RESET_CODE_LENGTH, RESET_CODE_MINUTES
from ..core.enums import NotificationPriority, NotificationType, Role
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidRefreshTokenError,
    NotFoundError,
    ValidationError,
)
from ..mail.sender import EmailSender
from ..mail.templates import reset_code_email, welcome_email
from ..notifications.service import NotificationService
from ..users.model import User
from ..users.repository import UserRepository
from .model import AuthResult, DeviceInfo, TokenPair
from .repository import PasswordResetRepository, RefreshTokenRepository
from .tokens import TokenCodec

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid email or password"


def generate_reset_code(length: int = RESET_CODE_LENGTH) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


class AuthService:
    """Use case: authenticate users and manage their token lifecycle."""

    def __init__(
        self,
        users: UserRepository,
        refresh_tokens: RefreshTokenRepository,
        password_resets: PasswordResetRepository,
        codec: TokenCodec,
        notifications: NotificationService,
        email: EmailSender,
        *,
        clock: Callable[[], datetime] = now_local,
        reset_code_minutes: int = RESET_CODE_MINUTES,
    ):
        self._users = users
        self._refresh_tokens = refresh_tokens
        self._resets = password_resets
        self._codec = codec
        self._notifications = notifications
        self._email = email
        self._clock = clock
        self._reset_ttl = timedelta(minutes=reset_code_minutes)

    def _issue_pair(self, user: User, *, device: DeviceInfo, now: datetime) -> TokenPair:
        access = self._codec.issue_access(user_id=user.user_id, role=user.role.value, now=now)
        refresh = self._codec.issue_refresh(user_id=user.user_id, role=user.role.value, now=now)
        self._refresh_tokens.create(
            user_id=user.user_id,
            token=refresh,
            expires_at=now + self._codec.refresh_ttl,
            device=device,
        )
        return TokenPair(access_token=access, refresh_token=refresh)

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    # Sessions ---------------------------------------------------------------

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        device: DeviceInfo = DeviceInfo(),
        now: Optional[datetime] = None,
    ) -> AuthResult:
        """Self-registration always creates an employee account."""
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        now = now or self._clock()

        if self._users.get_by_email(email):
            raise ConflictError("Email is already registered")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
        )
        user = self._require_user(user_id)
        tokens = self._issue_pair(user, device=device, now=now)

        self._notifications.notify(
            user.user_id,
            "Welcome!",
            f"Welcome {user.name}! Your account has been created.",
            NotificationType.SYSTEM,
            NotificationPriority.MEDIUM,
            {"type": "welcome"},
        )
        subject, html, text = welcome_email(user.name)
        result = self._email.send(to=user.email, subject=subject, html=html, text=text)
        if not result.success:
            logger.warning("welcome email not delivered user_id=%s", user.user_id)

        logger.info("register user_id=%s ip=%s", user.user_id, device.ip)
        return AuthResult(user=user, tokens=tokens)

    def login(
        self,
        *,
        email: str,
        password: str,
        device: DeviceInfo = DeviceInfo(),
        now: Optional[datetime] = None,
    ) -> AuthResult:
        if not isinstance(email, str) or not isinstance(password, str) or not email.strip() or not password:
            raise ValidationError("Email and password are required")
        now = now or self._clock()

        user = self._users.get_by_email(email.strip().lower())
        if not user or not check_password_hash(user.password_hash, password):
            logger.info("login failed email=%s ip=%s", email.strip().lower(), device.ip)
            raise AuthenticationError(_BAD_CREDENTIALS)

        # Last login wins.
        self._refresh_tokens.deactivate_all_for_user(user.user_id)
        tokens = self._issue_pair(user, device=device, now=now)

        self._notifications.notify(
            user.user_id,
            "New Login",
            f"New login from {device.device_type} ({device.ip or 'unknown ip'}).",
            NotificationType.INFO,
            NotificationPriority.LOW,
            {"ip": device.ip, "userAgent": device.user_agent, "loginTime": now.isoformat()},
        )
        logger.info("login user_id=%s ip=%s", user.user_id, device.ip)
        return AuthResult(user=user, tokens=tokens)

    def refresh(self, refresh_token: Optional[str], *, now: Optional[datetime] = None) -> tuple[User, str]:
        """Mint a new access token; the refresh token itself is not rotated."""
        now = now or self._clock()
        claims = self._codec.verify_refresh(refresh_token or "", now=now)

        row = self._refresh_tokens.find_active(token=refresh_token, user_id=claims.user_id, now=now)
        if not row:
            raise InvalidRefreshTokenError()
        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise InvalidRefreshTokenError()

        access = self._codec.issue_access(user_id=user.user_id, role=user.role.value, now=now)
        return user, access

    def logout(self, refresh_token: Optional[str], *, user_id: Optional[int] = None) -> None:
        if refresh_token:
            self._refresh_tokens.deactivate(refresh_token)
        logger.info("logout user_id=%s", user_id)

    def logout_all(self, user_id: int) -> int:
        count = self._refresh_tokens.deactivate_all_for_user(user_id)
        logger.info("logout_all user_id=%s sessions=%s", user_id, count)
        return count

    # Passwords --------------------------------------------------------------

    def change_password(
        self,
        user_id: int,
        *,
        current_password: str,
        new_password: str,
        refresh_token: Optional[str] = None,
    ) -> None:
        """Replace the password; sessions other than the presented one are closed."""
        if not isinstance(current_password, str) or not current_password:
            raise ValidationError("Current password is required")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        user = self._require_user(user_id)
        if not check_password_hash(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")

        self._users.update_password(user_id, password_hash=generate_password_hash(new_password))
        self._refresh_tokens.deactivate_all_for_user(user_id, except_token=refresh_token)

        self._notifications.notify(
            user_id,
            "Password Changed",
            "Your password was changed. Other sessions have been signed out.",
            NotificationType.SYSTEM,
            NotificationPriority.HIGH,
        )
        logger.info("change_password user_id=%s", user_id)

    def forgot_password(
        self,
        email: str,
        *,
        device: DeviceInfo = DeviceInfo(),
        now: Optional[datetime] = None,
    ) -> None:
        email = require_email(email)
        now = now or self._clock()

        user = self._users.get_by_email(email)
        if not user:
            raise NotFoundError("No account found with that email")

        code = generate_reset_code()
        minutes = int(self._reset_ttl.total_seconds() // 60)
        self._resets.create(
            user_id=user.user_id,
            email=user.email,
            code=code,
            expires_at=now + self._reset_ttl,
            device=device,
        )

        subject, html, text = reset_code_email(user.name, code, minutes)
        result = self._email.send(to=user.email, subject=subject, html=html, text=text)
        if result.success:
            self._notifications.notify(
                user.user_id,
                "Password Reset Requested",
                "A password reset code was sent to your email.",
                NotificationType.SYSTEM,
                NotificationPriority.HIGH,
            )
        else:
            logger.warning("reset email not delivered user_id=%s; falling back to notification", user.user_id)
            self._notifications.notify(
                user.user_id,
                "Password Reset Code",
                f"Your password reset code is {code}. It expires in {minutes} minutes.",
                NotificationType.SYSTEM,
                NotificationPriority.URGENT,
                {"code": code, "expiresAt": (now + self._reset_ttl).isoformat()},
            )
        logger.info("forgot_password user_id=%s ip=%s", user.user_id, device.ip)

    def reset_password(
        self,
        *,
        email: str,
        code: str,
        new_password: str,
        now: Optional[datetime] = None,
    ) -> None:
        email = require_email(email)
        code = require_non_empty(code, "Code")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        now = now or self._clock()

        reset = self._resets.find_unused(email=email, code=code)
        if not reset:
            raise ValidationError("Invalid or expired reset code")
        if reset.expires_at <= now:
            raise ValidationError("Reset code has expired")

        user = self._require_user(reset.user_id)
        if not self._resets.mark_used(reset.code_id):
            raise ValidationError("Invalid or expired reset code")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        self._refresh_tokens.deactivate_all_for_user(user.user_id)

        self._notifications.notify(
            user.user_id,
            "Password Reset",
            "Your password has been reset. Please sign in again.",
            NotificationType.SYSTEM,
            NotificationPriority.HIGH,
        )
        logger.info("reset_password user_id=%s", user.user_id)

    # Identity ---------------------------------------------------------------

    def authenticate_access_token(self, token: Optional[str]) -> User:
        claims = self._codec.verify_access(token or "", now=self._clock())
        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise AuthenticationError("User no longer exists")
        return user

    def me(self, user_id: int) -> dict:
        user = self._require_user(user_id)
        return {**user.to_public(), "unreadNotifications": self._notifications.unread_count(user_id)}
