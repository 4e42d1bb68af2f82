"""Workspace - in-memory state of the billing dashboard

Holds the loaded students, events and notices, and wires them to the billing
engine and the notice reconciler.
"""

from __future__ import annotations

import logging
import threading

from tutorbook.domain.errors import MissingCredentialsError
from tutorbook.domain.models import (
    CalendarEvent,
    DashboardStats,
    MonthlyReport,
    Notice,
    ReconcileResult,
    ReportTotals,
    Student,
)
from tutorbook.domain.ports import EventSource, NoticeSource, StudentDirectory
from tutorbook.services.association import link_events
from tutorbook.services.billing import build_dashboard, build_reports, summarize
from tutorbook.services.notice_reconciler import NoticeReconciler

logger = logging.getLogger(__name__)


class Workspace:
    """
    Students, events and notices of one tutor.

    Reports are a view: they are recomputed on every call and never stored.
    The event tuple is replaced as a whole after a reconciliation, so
    readers always see either the old or the new set.
    """

    def __init__(
        self,
        students: StudentDirectory,
        events: EventSource,
        notices: NoticeSource,
        reconciler: NoticeReconciler | None = None,
    ) -> None:
        """
        Args:
            students: student records
            events: class schedule
            notices: inbound notices
            reconciler: None when the language model is not configured
        """
        self._student_source = students
        self._event_source = events
        self._notice_source = notices
        self._reconciler = reconciler

        self._lock = threading.Lock()
        self._scan_lock = threading.Lock()  # one batch at a time
        self._students: tuple[Student, ...] = ()
        self._events: tuple[CalendarEvent, ...] = ()
        self._notices: tuple[Notice, ...] = ()

    @property
    def students(self) -> tuple[Student, ...]:
        return self._students

    @property
    def events(self) -> tuple[CalendarEvent, ...]:
        return self._events

    @property
    def notices(self) -> tuple[Notice, ...]:
        return self._notices

    @property
    def can_scan_notices(self) -> bool:
        return self._reconciler is not None

    def sync(self) -> None:
        """Reload everything from the sources. Local cancellations are dropped."""
        students = tuple(self._student_source.load_students())
        events = tuple(link_events(students, self._event_source.list_events()))
        notices = tuple(self._notice_source.list_notices())

        with self._lock:
            self._students = students
            self._events = events
            self._notices = notices

        logger.info(
            "Synced %d students, %d events, %d notices",
            len(students),
            len(events),
            len(notices),
        )

    def _snapshot(self) -> tuple[tuple[Student, ...], tuple[CalendarEvent, ...]]:
        with self._lock:
            return self._students, self._events

    def reports(self, month: int, year: int | None = None) -> list[MonthlyReport]:
        students, events = self._snapshot()
        return build_reports(students, events, month, year)

    def totals(self, month: int, year: int | None = None) -> ReportTotals:
        return summarize(self.reports(month, year))

    def dashboard(self) -> DashboardStats:
        students, events = self._snapshot()
        return build_dashboard(students, events)

    def scan_notices(self, cancel_event: threading.Event | None = None) -> ReconcileResult:
        """
        Reconcile all notices and keep the resulting events.

        Raises:
            MissingCredentialsError: no language model is configured.
                                     Raised before any notice is analyzed.
        """
        if self._reconciler is None:
            raise MissingCredentialsError(
                "No Gemini project configured (PROJECT_ID is not set)"
            )

        with self._scan_lock:
            with self._lock:
                notices, events, students = self._notices, self._events, self._students
            result = self._reconciler.reconcile(
                notices, events, students, cancel_event=cancel_event
            )
            with self._lock:
                self._events = result.events

        return result
