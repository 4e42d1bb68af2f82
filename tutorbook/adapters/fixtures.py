"""Fixture data sources

StudentDirectory / EventSource / NoticeSource implementations backed by a
static sample data set. Dates are relative to "today" so the current month
always has data. Stands in for calendar and mailbox sync.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from tutorbook.domain.models import (
    CANCELLED_TAG,
    TRIAL_TAG,
    CalendarEvent,
    EventStatus,
    Notice,
    PricingModel,
    Student,
)
from tutorbook.domain.ports import EventSource, NoticeSource, StudentDirectory

logger = logging.getLogger(__name__)


class FixtureStudentDirectory(StudentDirectory):
    """Three sample students (two SESSION, one HOURLY)"""

    def load_students(self) -> list[Student]:
        students = [
            Student(
                id="s1",
                name="Minh An",
                parent_name="Chị Lan",
                class_name="8A",
                hourly_rate=200000,
                session_rate=300000,
                pricing_model=PricingModel.SESSION,
                email="an.minh@example.com",
            ),
            Student(
                id="s2",
                name="Bảo Ngọc",
                parent_name="Bác Nguyễn Hoàng",
                class_name="7 Oxford",
                hourly_rate=250000,
                session_rate=400000,
                pricing_model=PricingModel.SESSION,
                email="ngoc.bao@example.com",
            ),
            Student(
                id="s3",
                name="Gia Huy",
                parent_name="Anh Tuấn",
                class_name="Lý 10",
                hourly_rate=180000,
                session_rate=250000,
                pricing_model=PricingModel.HOURLY,
                email="huy.gia@example.com",
            ),
        ]
        logger.info("Loaded %d fixture students", len(students))
        return students


class _RelativeClock:
    """Builds datetimes relative to a reference day"""

    def __init__(self, today: date | None, timezone: str) -> None:
        self._tz = ZoneInfo(timezone)
        self._today = today or datetime.now(self._tz).date()

    def at(self, days: int, hour: int = 0) -> datetime:
        day = self._today + timedelta(days=days)
        return datetime.combine(day, time(hour), tzinfo=self._tz)


class FixtureEventSource(EventSource):
    """
    Sample schedule.

    - Minh An: one completed class, one trial, one upcoming class
    - Bảo Ngọc: two completed classes (the latest one has a sick notice)
    - Gia Huy: one class cancelled in the calendar
    """

    def __init__(self, today: date | None = None, timezone: str = "Asia/Ho_Chi_Minh"):
        """
        Args:
            today: reference day (default: today in the given timezone)
            timezone: IANA timezone of the events
        """
        self._clock = _RelativeClock(today, timezone)

    def list_events(self) -> list[CalendarEvent]:
        at = self._clock.at
        events = [
            CalendarEvent(
                id="e1",
                title="Toán - Minh An - Lớp 8",
                start=at(-10, 18),
                end=at(-10, 20),
                description="Bài tập đại số.",
                status=EventStatus.COMPLETED,
            ),
            CalendarEvent(
                id="e2",
                title="Toán - Minh An - Lớp 8",
                start=at(-3, 18),
                end=at(-3, 20),
                description=f"Hình học {TRIAL_TAG}",
                tags=(TRIAL_TAG,),
                status=EventStatus.TRIAL,
            ),
            CalendarEvent(
                id="e3",
                title="Toán - Minh An - Lớp 8",
                start=at(2, 18),
                end=at(2, 20),
                status=EventStatus.SCHEDULED,
            ),
            CalendarEvent(
                id="e4",
                title="Tiếng Anh - Bảo Ngọc",
                start=at(-8, 9),
                end=at(-8, 10),
                status=EventStatus.COMPLETED,
            ),
            CalendarEvent(
                id="e5",
                title="Tiếng Anh - Bảo Ngọc",
                start=at(-1, 9),
                end=at(-1, 10),
                status=EventStatus.COMPLETED,
            ),
            CalendarEvent(
                id="e6",
                title="Lý - Gia Huy",
                start=at(-5, 14),
                end=at(-5, 16),
                description=f"Nghỉ ốm {CANCELLED_TAG}",
                tags=(CANCELLED_TAG,),
                status=EventStatus.CANCELLED,
            ),
        ]
        logger.info("Loaded %d fixture events", len(events))
        return events


class FixtureNoticeSource(NoticeSource):
    """Two sample parent emails: a sick-day cancellation and a reschedule request"""

    def __init__(self, today: date | None = None, timezone: str = "Asia/Ho_Chi_Minh"):
        self._clock = _RelativeClock(today, timezone)

    def list_notices(self) -> list[Notice]:
        at = self._clock.at
        yesterday = at(-1).strftime("%d/%m/%Y")
        notices = [
            Notice(
                id="m1",
                subject="Xin phép nghỉ học - Bảo Ngọc",
                snippet=(
                    f"Chào thầy, hôm qua (ngày {yesterday}) Bảo Ngọc bị sốt nên con "
                    "không tham gia lớp Tiếng Anh được ạ. Gia đình xin phép nghỉ buổi này."
                ),
                date=at(0, 8),
                sender="phuhuynh@example.com",
                labels=("Class-Notice", "Inbox"),
            ),
            Notice(
                id="m2",
                subject="Đổi lịch học Minh An",
                snippet=(
                    "Thầy ơi, buổi học Toán thứ 3 tuần sau cho Minh An xin chuyển "
                    "sang thứ 5 được không ạ?"
                ),
                date=at(-2, 10),
                sender="me.minhan@example.com",
                labels=("Class-Notice",),
            ),
        ]
        logger.info("Loaded %d fixture notices", len(notices))
        return notices
