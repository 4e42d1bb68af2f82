"""Billing - monthly fee reconciliation engine

Pure functions: every call recomputes all reports from the given students
and events. Nothing is cached or mutated, so the functions are reentrant and
students can be computed independently.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from tutorbook.domain.models import (
    CalendarEvent,
    ClassSummary,
    DashboardStats,
    EventStatus,
    MonthlyReport,
    PricingModel,
    ReportTotals,
    Student,
)
from tutorbook.services.association import events_for_student, find_ambiguous_titles
from tutorbook.services.classifier import is_billable

logger = logging.getLogger(__name__)

_MS_PER_HOUR = 3_600_000
_HOURLY_SESSION_FACTOR = 1.5


def duration_hours(event: CalendarEvent) -> float:
    """Fractional hours from millisecond precision. Negative when end < start."""
    millis = (event.end - event.start) // timedelta(milliseconds=1)
    return millis / _MS_PER_HOUR


def fee_per_session(student: Student) -> float:
    """
    Displayed per-session price.

    For a student without a session rate this is an estimate
    (hourly rate x 1.5) and is never used in the total.
    """
    if student.session_rate > 0:
        return student.session_rate
    return student.hourly_rate * _HOURLY_SESSION_FACTOR


def amount_for(student: Student, billable: Sequence[CalendarEvent]) -> float:
    """Total fee for the billable events of one student"""
    if student.pricing_model is PricingModel.SESSION:
        return len(billable) * student.session_rate

    # Applied per event and summed, not total hours x rate
    total = 0.0
    for event in billable:
        hours = duration_hours(event)
        if hours < 0:
            logger.warning(
                "Event %s ends before it starts (%.2fh), counted as negative",
                event.id,
                hours,
            )
        total += hours * student.hourly_rate
    return total


def build_report(
    student: Student,
    events: Sequence[CalendarEvent],
    month: int,
    year: int | None = None,
) -> MonthlyReport:
    """
    Build the report of one student for one month.

    Args:
        student: the student to bill
        events: every known event (filtered here by student and month)
        month: month of year, 1..12
        year: restrict to this year. None matches the month of any year.

    Returns:
        MonthlyReport: details keeps every matched event, billable or not
    """
    student_events = events_for_student(student, events, month=month, year=year)
    billable = [e for e in student_events if is_billable(e)]

    return MonthlyReport(
        student_id=student.id,
        parent_name=student.parent_name,
        student_name=student.name,
        class_name=student.class_name,
        fee_per_session=fee_per_session(student),
        total_sessions=len(billable),
        total_amount=amount_for(student, billable),
        days=tuple(sorted(e.start.day for e in billable)),
        details=tuple(student_events),
    )


def build_reports(
    students: Sequence[Student],
    events: Sequence[CalendarEvent],
    month: int,
    year: int | None = None,
) -> list[MonthlyReport]:
    """One report per student, in input student order"""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")

    for event_id, student_ids in find_ambiguous_titles(students, events).items():
        logger.warning(
            "Event %s matches several students by name: %s",
            event_id,
            ", ".join(student_ids),
        )

    reports = [build_report(s, events, month, year) for s in students]
    logger.debug(
        "Built %d reports for month=%d year=%s from %d events",
        len(reports),
        month,
        year,
        len(events),
    )
    return reports


def summarize(reports: Sequence[MonthlyReport]) -> ReportTotals:
    """Grand-total row"""
    return ReportTotals(
        total_sessions=sum(r.total_sessions for r in reports),
        total_amount=sum(r.total_amount for r in reports),
    )


def build_dashboard(
    students: Sequence[Student], events: Sequence[CalendarEvent]
) -> DashboardStats:
    """
    Overview across every loaded event (no month filter).

    Classes are listed in the order their first student appears.
    """
    revenue_by_student = {
        s.id: amount_for(s, [e for e in events_for_student(s, events) if is_billable(e)])
        for s in students
    }

    class_names = list(dict.fromkeys(s.class_name for s in students))
    classes = []
    for class_name in class_names:
        members = [s for s in students if s.class_name == class_name]
        classes.append(
            ClassSummary(
                class_name=class_name,
                student_count=len(members),
                revenue=sum(revenue_by_student[s.id] for s in members),
                student_ids=tuple(s.id for s in members),
            )
        )

    cancelled = sum(1 for e in events if e.status is EventStatus.CANCELLED)
    return DashboardStats(
        total_classes=len(events) - cancelled,
        cancelled_classes=cancelled,
        total_revenue=sum(revenue_by_student.values()),
        classes=tuple(classes),
    )
