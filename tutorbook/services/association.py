"""Student-event association

Events carry an optional explicit student_id. Legacy events without one are
matched by a case-sensitive substring of the student's name in the title,
which can misattribute when one name contains another ("An" / "Minh An").
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from tutorbook.domain.models import CalendarEvent, Student

logger = logging.getLogger(__name__)


def matches_student(student: Student, event: CalendarEvent) -> bool:
    if event.student_id is not None:
        return event.student_id == student.id
    return student.name in event.title


def in_month(event: CalendarEvent, month: int, year: int | None = None) -> bool:
    """month is 1..12. Without a year, the same month of any year matches."""
    if event.start.month != month:
        return False
    return year is None or event.start.year == year


def events_for_student(
    student: Student,
    events: Iterable[CalendarEvent],
    month: int | None = None,
    year: int | None = None,
) -> list[CalendarEvent]:
    """Events of one student, optionally restricted to a month, in input order"""
    return [
        e
        for e in events
        if matches_student(student, e) and (month is None or in_month(e, month, year))
    ]


def find_ambiguous_titles(
    students: Sequence[Student], events: Iterable[CalendarEvent]
) -> dict[str, list[str]]:
    """
    Find unlinked events whose title matches more than one student.

    Returns:
        dict[str, list[str]]: event id -> ids of every matching student
    """
    ambiguous: dict[str, list[str]] = {}
    for event in events:
        if event.student_id is not None:
            continue
        matched = [s.id for s in students if s.name in event.title]
        if len(matched) > 1:
            ambiguous[event.id] = matched
    return ambiguous


def link_events(
    students: Sequence[Student], events: Iterable[CalendarEvent]
) -> list[CalendarEvent]:
    """
    Fallback linking pass for legacy events.

    Unlinked events matching exactly one student get that student's id.
    Ambiguous or unmatched events stay unlinked and are logged.
    """
    linked: list[CalendarEvent] = []
    for event in events:
        if event.student_id is not None:
            linked.append(event)
            continue

        matched = [s for s in students if s.name in event.title]
        if len(matched) == 1:
            linked.append(event.linked_to(matched[0].id))
        else:
            if matched:
                logger.warning(
                    "Event %s (%s) matches %d students, left unlinked: %s",
                    event.id,
                    event.title,
                    len(matched),
                    ", ".join(s.name for s in matched),
                )
            else:
                logger.debug("Event %s (%s) matches no student", event.id, event.title)
            linked.append(event)
    return linked
