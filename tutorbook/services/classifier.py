"""Event classifier - decides whether a class counts toward billing

Both the status and the tags are checked: a calendar tag can mark an event
whose status field has not been updated yet.

Every other event is billable, including future SCHEDULED ones: the fee
follows what is on the calendar, not only completed work.
"""

from __future__ import annotations

from tutorbook.domain.models import (
    CANCELLED_TAG,
    TRIAL_TAG,
    CalendarEvent,
    EventStatus,
)


def is_trial(event: CalendarEvent) -> bool:
    return event.has_tag(TRIAL_TAG) or event.status is EventStatus.TRIAL


def is_cancelled(event: CalendarEvent) -> bool:
    return event.has_tag(CANCELLED_TAG) or event.status is EventStatus.CANCELLED


def is_billable(event: CalendarEvent) -> bool:
    """True unless the event is a trial or cancelled class"""
    return not (is_trial(event) or is_cancelled(event))
