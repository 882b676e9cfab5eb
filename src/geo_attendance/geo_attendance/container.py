from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_presence_repository import MySQLPresenceRepository
from .attendance.repository import PresenceRepository
from .attendance.service import AttendanceService
from .auth.mysql_token_repository import MySQLPasswordResetRepository, MySQLRefreshTokenRepository
from .auth.repository import PasswordResetRepository, RefreshTokenRepository
from .auth.service import AuthService
from .auth.tokens import TokenCodec
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_ACCESS_TOKEN_MINUTES, DEFAULT_REFRESH_TOKEN_DAYS, DEFAULT_WORK_START
from .database.connection import DBConfig, DatabaseConnection
from .geofence.mysql_office_location_repository import MySQLOfficeLocationRepository
from .geofence.repository import OfficeLocationRepository
from .geofence.service import GeofenceService
from .jobs.service import AttendanceJobs
from .mail.sender import EmailSender
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reports.service import AttendanceReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    presences_repo: PresenceRepository
    offices_repo: OfficeLocationRepository
    notifications_repo: NotificationRepository
    refresh_tokens_repo: RefreshTokenRepository
    password_resets_repo: PasswordResetRepository

    token_codec: TokenCodec
    auth_service: AuthService
    user_service: UserService
    geofence_service: GeofenceService
    notification_service: NotificationService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    jobs: AttendanceJobs


@dataclass(frozen=True)
class AuthSettings:
    access_secret: str
    refresh_secret: str
    access_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES
    refresh_days: int = DEFAULT_REFRESH_TOKEN_DAYS


def assemble(
    *,
    users_repo: UserRepository,
    presences_repo: PresenceRepository,
    offices_repo: OfficeLocationRepository,
    notifications_repo: NotificationRepository,
    refresh_tokens_repo: RefreshTokenRepository,
    password_resets_repo: PasswordResetRepository,
    email_sender: EmailSender,
    auth: AuthSettings,
    work_start: time = DEFAULT_WORK_START,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, fakes in tests)."""
    codec = TokenCodec(
        access_secret=auth.access_secret,
        refresh_secret=auth.refresh_secret,
        access_ttl=timedelta(minutes=auth.access_minutes),
        refresh_ttl=timedelta(days=auth.refresh_days),
        clock=clock,
    )
    notification_service = NotificationService(notifications_repo, users_repo, clock=clock)
    geofence_service = GeofenceService(offices_repo)
    report_service = AttendanceReportService(presences_repo, users_repo, clock=clock)

    auth_service = AuthService(
        users_repo,
        refresh_tokens_repo,
        password_resets_repo,
        codec,
        notification_service,
        email_sender,
        clock=clock,
    )
    attendance_service = AttendanceService(
        presences_repo,
        geofence_service,
        notification_service,
        strategy_factory=AttendanceStrategyFactory(),
        work_start=work_start,
        clock=clock,
    )
    jobs = AttendanceJobs(
        users_repo,
        presences_repo,
        notification_service,
        report_service,
        refresh_tokens_repo,
        password_resets_repo,
        clock=clock,
    )

    return Container(
        users_repo=users_repo,
        presences_repo=presences_repo,
        offices_repo=offices_repo,
        notifications_repo=notifications_repo,
        refresh_tokens_repo=refresh_tokens_repo,
        password_resets_repo=password_resets_repo,
        token_codec=codec,
        auth_service=auth_service,
        user_service=UserService(users_repo),
        geofence_service=geofence_service,
        notification_service=notification_service,
        attendance_service=attendance_service,
        report_service=report_service,
        jobs=jobs,
    )


def build_container(
    *,
    db_config: dict,
    auth: AuthSettings,
    email_sender: EmailSender,
    work_start: time = DEFAULT_WORK_START,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        presences_repo=MySQLPresenceRepository(conn),
        offices_repo=MySQLOfficeLocationRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        refresh_tokens_repo=MySQLRefreshTokenRepository(conn),
        password_resets_repo=MySQLPasswordResetRepository(conn),
        email_sender=email_sender,
        auth=auth,
        work_start=work_start,
        clock=clock or now_local,
    )
