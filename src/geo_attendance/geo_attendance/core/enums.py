from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Clock-in classification, fixed when the presence record is created."""

    ON_TIME = "ontime"
    LATE = "late"


class NotificationType(str, Enum):
    ATTENDANCE = "attendance"
    REMINDER = "reminder"
    WARNING = "warning"
    INFO = "info"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
