"""Domain models - plain data structures with no external dependencies"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

TRIAL_TAG = "#trial"
CANCELLED_TAG = "#cancelled"


class EventStatus(Enum):
    """Lifecycle state of a class occurrence"""

    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    TRIAL = "TRIAL"
    PAID = "PAID"


class PricingModel(Enum):
    """How a student's monthly fee is computed"""

    HOURLY = "HOURLY"  # rate x duration
    SESSION = "SESSION"  # flat rate per class


class NoticeAction(Enum):
    """Intent extracted from a notice"""

    CANCEL = "CANCEL"
    RESCHEDULE = "RESCHEDULE"
    CONFIRM = "CONFIRM"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Student:
    """Student record (rates in whole đồng)"""

    id: str  # e.g. "s1"
    name: str  # e.g. "Minh An"
    parent_name: str  # e.g. "Chị Lan"
    class_name: str  # grouping key, e.g. "8A"
    hourly_rate: int
    session_rate: int
    pricing_model: PricingModel
    email: str = ""


@dataclass(frozen=True)
class CalendarEvent:
    """
    One scheduled or historical class.

    status is authoritative. tags are annotations coming from the calendar
    and may lead the status (a "#cancelled" tag on a COMPLETED event).
    """

    id: str
    title: str  # e.g. "Toán - Minh An - Lớp 8"
    start: datetime
    end: datetime
    description: str = ""
    tags: tuple[str, ...] = ()
    status: EventStatus = EventStatus.SCHEDULED
    student_id: str | None = None  # explicit link, None for legacy events

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def cancelled(self, note: str = "") -> CalendarEvent:
        """Return a cancelled copy. No-op when the status is already CANCELLED."""
        if self.status is EventStatus.CANCELLED:
            return self

        tags = self.tags if CANCELLED_TAG in self.tags else (*self.tags, CANCELLED_TAG)
        description = f"{self.description} {note}".strip() if note else self.description
        return replace(
            self,
            status=EventStatus.CANCELLED,
            tags=tags,
            description=description,
        )

    def linked_to(self, student_id: str) -> CalendarEvent:
        return replace(self, student_id=student_id)


@dataclass(frozen=True)
class Notice:
    """Inbound free-text message (a parent's email). Read only."""

    id: str
    subject: str
    snippet: str
    date: datetime
    sender: str = ""
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class NoticeAnalysis:
    """Structured intent extracted from a Notice by the language model"""

    related_student_name: str | None
    target_date: str | None  # ISO date: "2025-10-25"
    action: NoticeAction
    reason: str | None = None

    @classmethod
    def failed(cls) -> NoticeAnalysis:
        return cls(
            related_student_name=None,
            target_date=None,
            action=NoticeAction.UNKNOWN,
            reason="AI Analysis Failed",
        )

    def target_day(self) -> date | None:
        """
        Resolve target_date to a calendar day.

        Full ISO timestamps are accepted; the time of day is dropped.
        Unparseable values resolve to None.
        """
        if not self.target_date:
            return None
        value = self.target_date.strip()
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None


@dataclass(frozen=True)
class MonthlyReport:
    """Per-student billing summary for one month. Fully derived."""

    student_id: str
    parent_name: str
    student_name: str
    class_name: str
    fee_per_session: float  # display only
    total_sessions: int
    total_amount: float
    days: tuple[int, ...]  # ascending day-of-month of billable events
    details: tuple[CalendarEvent, ...] = ()  # every matched event, billable or not

    @property
    def day_list(self) -> str:
        """e.g. "6, 7, 13" """
        return ", ".join(str(d) for d in self.days)


@dataclass(frozen=True)
class ReportTotals:
    """Grand-total row of a report table"""

    total_sessions: int
    total_amount: float


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a notice reconciliation batch"""

    events: tuple[CalendarEvent, ...]
    log: list[str] = field(default_factory=list)
    applied: list[str] = field(default_factory=list)  # ids of newly cancelled events
    cancelled: bool = False  # batch aborted before all notices were processed


@dataclass(frozen=True)
class ClassSummary:
    """Revenue per class group"""

    class_name: str
    student_count: int
    revenue: float
    student_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class DashboardStats:
    """Overview figures across every loaded event"""

    total_classes: int  # events that are not cancelled
    cancelled_classes: int
    total_revenue: float
    classes: tuple[ClassSummary, ...] = ()
