"""NoticeReconciler - applies cancellation notices to class events

Notices are analyzed strictly one at a time, in input order. The log order
and the "first matching event wins" resolution both depend on it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Future, wait
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date

from tutorbook.domain.models import (
    CalendarEvent,
    EventStatus,
    Notice,
    NoticeAction,
    NoticeAnalysis,
    ReconcileResult,
    Student,
)
from tutorbook.domain.ports import NoticeAnalyzer

logger = logging.getLogger(__name__)

AUDIT_NOTE = "[AI: Huỷ từ email]"


class NoticeReconciler:
    """
    Turns parent notices into event cancellations.

    Processing per notice:
    1. Analyze with the NoticeAnalyzer (timeout or error -> UNKNOWN)
    2. Log the detected student and action
    3. CANCEL with a target date: cancel the first event of that student
       on that calendar day, unless it is already cancelled

    RESCHEDULE / CONFIRM / UNKNOWN are logged only.
    The input events are never mutated; a new tuple is returned.
    Reports are not recomputed here.
    """

    def __init__(self, analyzer: NoticeAnalyzer, timeout_seconds: float = 30.0) -> None:
        """
        Args:
            analyzer: notice analysis (Gemini etc.)
            timeout_seconds: per-notice limit, a timeout counts as a failure
        """
        if analyzer is None:
            raise ValueError("analyzer is required")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._analyzer = analyzer
        self._timeout = timeout_seconds
        self._guard = threading.Lock()
        self._in_flight: Future | None = None

    def reconcile(
        self,
        notices: Sequence[Notice],
        events: Sequence[CalendarEvent],
        students: Sequence[Student],
        cancel_event: threading.Event | None = None,
    ) -> ReconcileResult:
        """
        Process every notice in order.

        Args:
            notices: notices to analyze
            events: current events (left untouched)
            students: known students, their names are passed to the analyzer
            cancel_event: when set, stops before the next notice.
                          Cancellations applied so far are kept.

        Returns:
            ReconcileResult: updated events, log lines, ids of cancelled events
        """
        current = list(events)
        log: list[str] = []
        applied: list[str] = []
        student_names = [s.name for s in students]

        logger.info("Reconciling %d notices against %d events", len(notices), len(current))

        for notice in notices:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Reconciliation cancelled, %d cancellations kept", len(applied))
                return ReconcileResult(
                    events=tuple(current), log=log, applied=applied, cancelled=True
                )

            log.append(f'Analyzing email: "{notice.subject}"...')
            analysis, ok = self._analyze(notice, student_names)
            if not ok:
                log.append("-> Error analyzing email.")
                continue

            if analysis.related_student_name:
                log.append(
                    f"-> Detected: {analysis.related_student_name}, "
                    f"Action: {analysis.action.value}"
                )
            else:
                log.append(f"-> No student detected, Action: {analysis.action.value}")

            if analysis.action is not NoticeAction.CANCEL:
                continue

            target_day = analysis.target_day()
            if target_day is None or not analysis.related_student_name:
                continue

            index = _find_target(current, students, analysis.related_student_name, target_day)
            if index is None:
                logger.info(
                    "No event for %s on %s, notice %s left unresolved",
                    analysis.related_student_name,
                    target_day,
                    notice.id,
                )
                continue

            event = current[index]
            if event.status is EventStatus.CANCELLED:
                logger.debug("Event %s already cancelled", event.id)
                continue

            current[index] = event.cancelled(AUDIT_NOTE)
            applied.append(event.id)
            log.append(f"-> Auto-cancelled class on {target_day.day}/{target_day.month}")
            logger.info(
                "Cancelled event %s from notice %s",
                event.id,
                notice.id,
                extra={"extra_fields": {"event_id": event.id, "notice_id": notice.id}},
            )

        logger.info("Reconciliation complete: %d cancellations", len(applied))
        return ReconcileResult(events=tuple(current), log=log, applied=applied)

    def _wait_idle(self) -> bool:
        """Wait up to the timeout for an abandoned analysis to finish"""
        with self._guard:
            pending = self._in_flight
        if pending is None:
            return True
        done, _ = wait([pending], timeout=self._timeout)
        return bool(done)

    def _analyze(
        self, notice: Notice, student_names: list[str]
    ) -> tuple[NoticeAnalysis, bool]:
        """
        Run one analysis with the timeout.

        At most one analyzer call is running at any time. A call that timed
        out keeps the slot until it returns; when it is still running after
        another full timeout, this notice is not analyzed.

        Returns:
            (analysis, ok): on error or timeout, NoticeAnalysis.failed() and False
        """
        if not self._wait_idle():
            logger.warning(
                "Previous analysis still running, notice %s not analyzed", notice.id
            )
            return NoticeAnalysis.failed(), False

        future = self._submit(notice, student_names)
        try:
            return future.result(timeout=self._timeout), True
        except FutureTimeoutError:
            logger.warning(
                "Analysis of notice %s timed out after %.1fs", notice.id, self._timeout
            )
        except Exception:
            logger.exception("Analysis of notice %s failed", notice.id)
        return NoticeAnalysis.failed(), False

    def _submit(self, notice: Notice, student_names: list[str]) -> Future:
        # daemon worker: a hung call must not keep the process alive on exit
        future: Future = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self._analyzer.analyze(notice, student_names))
            except BaseException as e:
                future.set_exception(e)
            finally:
                with self._guard:
                    if self._in_flight is future:
                        self._in_flight = None

        with self._guard:
            self._in_flight = future
        threading.Thread(target=run, name=f"notice-analysis-{notice.id}", daemon=True).start()
        return future


def _find_target(
    events: Sequence[CalendarEvent],
    students: Sequence[Student],
    student_name: str,
    day: date,
) -> int | None:
    """
    Index of the first event of the named student on the given calendar day.

    Linked events match through the id of the student with exactly that
    name. Unlinked events fall back to the name inside the title.
    """
    linked_ids = {s.id for s in students if s.name == student_name}
    for index, event in enumerate(events):
        if event.start.date() != day:
            continue
        if event.student_id is not None:
            if event.student_id in linked_ids:
                return index
        elif student_name in event.title:
            return index
    return None
