from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time

from ...core.enums import AttendanceStatus, NotificationPriority


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    title: str
    priority: NotificationPriority


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, work_start: time) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def clock_in_message(self, *, now: datetime) -> str:
        raise NotImplementedError
