"""Shared test fixtures

Mocks and sample data available to every test.

Mocks:
- MagicMock(spec=ABC) keeps the port's method signatures
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from tutorbook.domain.models import (
    CalendarEvent,
    EventStatus,
    Notice,
    NoticeAction,
    NoticeAnalysis,
    PricingModel,
    Student,
)
from tutorbook.domain.ports import (
    EventSource,
    NoticeAnalyzer,
    NoticeSource,
    StudentDirectory,
)

# ========== Sample data ==========


@pytest.fixture
def student_minh_an() -> Student:
    """SESSION student"""
    return Student(
        id="s1",
        name="Minh An",
        parent_name="Chị Lan",
        class_name="8A",
        hourly_rate=200000,
        session_rate=300000,
        pricing_model=PricingModel.SESSION,
        email="an.minh@example.com",
    )


@pytest.fixture
def student_bao_ngoc() -> Student:
    """SESSION student"""
    return Student(
        id="s2",
        name="Bảo Ngọc",
        parent_name="Bác Nguyễn Hoàng",
        class_name="7 Oxford",
        hourly_rate=250000,
        session_rate=400000,
        pricing_model=PricingModel.SESSION,
        email="ngoc.bao@example.com",
    )


@pytest.fixture
def student_gia_huy() -> Student:
    """HOURLY student"""
    return Student(
        id="s3",
        name="Gia Huy",
        parent_name="Anh Tuấn",
        class_name="Lý 10",
        hourly_rate=180000,
        session_rate=250000,
        pricing_model=PricingModel.HOURLY,
        email="huy.gia@example.com",
    )


@pytest.fixture
def sample_students(student_minh_an, student_bao_ngoc, student_gia_huy) -> list[Student]:
    return [student_minh_an, student_bao_ngoc, student_gia_huy]


def make_event(
    event_id: str,
    title: str,
    start: datetime,
    hours: float = 2,
    status: EventStatus = EventStatus.COMPLETED,
    tags: tuple[str, ...] = (),
    description: str = "",
    student_id: str | None = None,
) -> CalendarEvent:
    """Build an event lasting `hours` from `start`"""
    return CalendarEvent(
        id=event_id,
        title=title,
        start=start,
        end=start + timedelta(hours=hours),
        description=description,
        tags=tags,
        status=status,
        student_id=student_id,
    )


@pytest.fixture
def sample_events() -> list[CalendarEvent]:
    """Events of October 2025 plus one in November"""
    return [
        make_event("e1", "Toán - Minh An - Lớp 8", datetime(2025, 10, 7, 18)),
        make_event(
            "e2",
            "Toán - Minh An - Lớp 8",
            datetime(2025, 10, 14, 18),
            status=EventStatus.TRIAL,
            tags=("#trial",),
        ),
        make_event(
            "e3",
            "Toán - Minh An - Lớp 8",
            datetime(2025, 10, 19, 18),
            status=EventStatus.SCHEDULED,
        ),
        make_event("e4", "Tiếng Anh - Bảo Ngọc", datetime(2025, 10, 9, 9), hours=1),
        make_event("e5", "Tiếng Anh - Bảo Ngọc", datetime(2025, 10, 16, 9), hours=1),
        make_event(
            "e6",
            "Lý - Gia Huy",
            datetime(2025, 10, 12, 14),
            status=EventStatus.CANCELLED,
            tags=("#cancelled",),
        ),
        make_event("e7", "Lý - Gia Huy", datetime(2025, 10, 6, 14)),
        make_event("e8", "Lý - Gia Huy", datetime(2025, 10, 13, 14)),
        make_event("e9", "Lý - Gia Huy", datetime(2025, 11, 3, 14)),
    ]


@pytest.fixture
def sick_notice() -> Notice:
    """Cancellation notice for Bảo Ngọc's class on 2025-10-16"""
    return Notice(
        id="m1",
        subject="Xin phép nghỉ học - Bảo Ngọc",
        snippet="Chào thầy, hôm qua Bảo Ngọc bị sốt nên con không tham gia lớp được ạ.",
        date=datetime(2025, 10, 17, 8),
        sender="phuhuynh@example.com",
        labels=("Class-Notice", "Inbox"),
    )


@pytest.fixture
def reschedule_notice() -> Notice:
    return Notice(
        id="m2",
        subject="Đổi lịch học Minh An",
        snippet="Thầy ơi, buổi học Toán thứ 3 tuần sau cho Minh An xin chuyển sang thứ 5.",
        date=datetime(2025, 10, 15, 10),
        sender="me.minhan@example.com",
        labels=("Class-Notice",),
    )


@pytest.fixture
def cancel_analysis() -> NoticeAnalysis:
    return NoticeAnalysis(
        related_student_name="Bảo Ngọc",
        target_date="2025-10-16",
        action=NoticeAction.CANCEL,
        reason="Bị sốt",
    )


@pytest.fixture
def reschedule_analysis() -> NoticeAnalysis:
    return NoticeAnalysis(
        related_student_name="Minh An",
        target_date="2025-10-21",
        action=NoticeAction.RESCHEDULE,
    )


# ========== Mock fixtures ==========


@pytest.fixture
def mock_analyzer(cancel_analysis) -> MagicMock:
    """NoticeAnalyzer mock"""
    mock = MagicMock(spec=NoticeAnalyzer)
    mock.analyze.return_value = cancel_analysis
    return mock


@pytest.fixture
def mock_student_directory(sample_students) -> MagicMock:
    """StudentDirectory mock"""
    mock = MagicMock(spec=StudentDirectory)
    mock.load_students.return_value = sample_students
    return mock


@pytest.fixture
def mock_event_source(sample_events) -> MagicMock:
    """EventSource mock"""
    mock = MagicMock(spec=EventSource)
    mock.list_events.return_value = sample_events
    return mock


@pytest.fixture
def mock_notice_source(sick_notice, reschedule_notice) -> MagicMock:
    """NoticeSource mock"""
    mock = MagicMock(spec=NoticeSource)
    mock.list_notices.return_value = [sick_notice, reschedule_notice]
    return mock
