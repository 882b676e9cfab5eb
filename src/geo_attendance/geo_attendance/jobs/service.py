"""Periodic attendance jobs.

Each job is a plain method taking ``now`` and returning how many items it
touched. Scheduling (weekday and hour guards) belongs to the cron table that
calls ``scripts/run_job.py``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from ..attendance.repository import PresenceRepository
from ..auth.repository import PasswordResetRepository, RefreshTokenRepository
from ..common.datetime_utils import format_time, now_local, previous_month
from ..core.enums import AttendanceStatus, NotificationPriority, NotificationType, Role
from ..notifications.model import NewNotification
from ..notifications.service import NotificationService
from ..reports.service import AttendanceReportService
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


class AttendanceJobs:
    def __init__(
        self,
        users: UserRepository,
        presences: PresenceRepository,
        notifications: NotificationService,
        reports: AttendanceReportService,
        refresh_tokens: RefreshTokenRepository,
        password_resets: PasswordResetRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._presences = presences
        self._notifications = notifications
        self._reports = reports
        self._refresh_tokens = refresh_tokens
        self._resets = password_resets
        self._clock = clock

    def registry(self) -> Dict[str, Callable[..., int]]:
        return {
            "daily-reminder": self.send_daily_reminder,
            "late-arrivals": self.send_late_arrival_notices,
            "clock-out-reminder": self.send_clock_out_reminder,
            "weekly-summary": self.send_weekly_summary,
            "monthly-report": self.send_monthly_report,
            "clean-notifications": self.clean_old_notifications,
            "purge-credentials": self.purge_expired_credentials,
        }

    def run(self, name: str, *, now: Optional[datetime] = None) -> int:
        jobs = self.registry()
        if name not in jobs:
            raise KeyError(f"Unknown job: {name}")
        count = jobs[name](now=now or self._clock())
        logger.info("job finished name=%s count=%d", name, count)
        return count

    def send_daily_reminder(self, *, now: Optional[datetime] = None) -> int:
        """Remind employees who have no presence record yet today."""
        now = now or self._clock()
        present = {r.user_id for r in self._presences.list_for_date(now.date())}
        items = [
            NewNotification(
                user_id=u.user_id,
                title="Clock In Reminder",
                message="Don't forget to clock in today. Work starts at 08:00.",
                type=NotificationType.REMINDER,
                priority=NotificationPriority.MEDIUM,
                data={"type": "daily_reminder", "date": now.date().isoformat()},
            )
            for u in self._users.list_by_role(Role.EMPLOYEE)
            if u.user_id not in present
        ]
        return self._notifications.notify_many(items)

    def send_late_arrival_notices(self, *, now: Optional[datetime] = None) -> int:
        now = now or self._clock()
        items = [
            NewNotification(
                user_id=r.user_id,
                title="Late Arrival",
                message=f"You clocked in late today at {format_time(r.clock_in)}. Please be on time.",
                type=NotificationType.WARNING,
                priority=NotificationPriority.HIGH,
                data={"type": "late_notification", "presenceId": r.presence_id},
            )
            for r in self._presences.list_for_date(now.date(), status=AttendanceStatus.LATE)
        ]
        return self._notifications.notify_many(items)

    def send_clock_out_reminder(self, *, now: Optional[datetime] = None) -> int:
        now = now or self._clock()
        items = [
            NewNotification(
                user_id=r.user_id,
                title="Clock Out Reminder",
                message="It's time to go home. Don't forget to clock out.",
                type=NotificationType.REMINDER,
                priority=NotificationPriority.MEDIUM,
                data={"type": "clock_out_reminder", "presenceId": r.presence_id},
            )
            for r in self._presences.list_for_date(now.date(), open_only=True)
        ]
        return self._notifications.notify_many(items)

    def send_weekly_summary(self, *, now: Optional[datetime] = None) -> int:
        now = now or self._clock()
        items = []
        for user in self._users.list_by_role(Role.EMPLOYEE):
            summary = self._reports.user_week_summary(user.user_id, day=now.date())
            items.append(
                NewNotification(
                    user_id=user.user_id,
                    title="Weekly Attendance Summary",
                    message=(
                        f"This week: {summary.total_days} days present, {summary.ontime_days} on time, "
                        f"{summary.late_days} late, {summary.total_work_hours} hours worked."
                    ),
                    type=NotificationType.INFO,
                    priority=NotificationPriority.LOW,
                    data={"type": "weekly_summary", **summary.to_dict(include_records=False)},
                )
            )
        return self._notifications.notify_many(items)

    def send_monthly_report(self, *, now: Optional[datetime] = None) -> int:
        """Report the previous calendar month to every employee."""
        now = now or self._clock()
        year, month = previous_month(now.date())
        items = []
        for user in self._users.list_by_role(Role.EMPLOYEE):
            summary = self._reports.user_month_summary(user.user_id, year=year, month=month)
            items.append(
                NewNotification(
                    user_id=user.user_id,
                    title="Monthly Attendance Report",
                    message=(
                        f"{year}-{month:02d}: {summary.total_days} days present, "
                        f"{summary.ontime_days} on time, {summary.late_days} late."
                    ),
                    type=NotificationType.INFO,
                    priority=NotificationPriority.MEDIUM,
                    data={"type": "monthly_report", "year": year, "month": month, **summary.to_dict(include_records=False)},
                )
            )
        return self._notifications.notify_many(items)

    def clean_old_notifications(self, *, now: Optional[datetime] = None) -> int:
        return self._notifications.purge_old(now=now or self._clock())

    def purge_expired_credentials(self, *, now: Optional[datetime] = None) -> int:
        now = now or self._clock()
        tokens = self._refresh_tokens.purge_expired(now=now)
        codes = self._resets.purge_expired(now=now)
        logger.info("purged expired credentials refresh_tokens=%d reset_codes=%d", tokens, codes)
        return tokens + codes
