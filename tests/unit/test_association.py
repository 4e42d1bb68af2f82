"""Student-event association tests"""

import logging
from datetime import datetime

from tests.conftest import make_event
from tutorbook.domain.models import PricingModel, Student
from tutorbook.services.association import (
    events_for_student,
    find_ambiguous_titles,
    in_month,
    link_events,
    matches_student,
)


def _student(student_id: str, name: str) -> Student:
    return Student(
        id=student_id,
        name=name,
        parent_name="",
        class_name="8A",
        hourly_rate=200000,
        session_rate=300000,
        pricing_model=PricingModel.SESSION,
    )


class TestMatchesStudent:
    """matches_student() tests"""

    def test_substring_match(self, student_minh_an):
        event = make_event("e1", "Toán - Minh An - Lớp 8", datetime(2025, 10, 7, 18))
        assert matches_student(student_minh_an, event)

    def test_substring_is_case_sensitive(self, student_minh_an):
        event = make_event("e1", "Toán - minh an", datetime(2025, 10, 7, 18))
        assert not matches_student(student_minh_an, event)

    def test_explicit_link_wins_over_title(self, student_minh_an, student_bao_ngoc):
        """A linked event belongs only to its student, whatever the title says"""
        event = make_event(
            "e1", "Toán - Minh An", datetime(2025, 10, 7, 18), student_id="s2"
        )
        assert not matches_student(student_minh_an, event)
        assert matches_student(student_bao_ngoc, event)


class TestMonthFilter:
    """in_month() / events_for_student() tests"""

    def test_month_ignores_year_by_default(self):
        event = make_event("e1", "Minh An", datetime(2024, 10, 7, 18))
        assert in_month(event, 10)
        assert not in_month(event, 10, year=2025)
        assert in_month(event, 10, year=2024)

    def test_events_for_student_keeps_input_order(self, student_gia_huy, sample_events):
        events = events_for_student(student_gia_huy, sample_events, month=10)
        assert [e.id for e in events] == ["e6", "e7", "e8"]

    def test_events_for_student_without_month(self, student_gia_huy, sample_events):
        events = events_for_student(student_gia_huy, sample_events)
        assert [e.id for e in events] == ["e6", "e7", "e8", "e9"]


class TestAmbiguity:
    """find_ambiguous_titles() / link_events() tests"""

    def test_find_ambiguous_titles(self):
        """"An" is a substring of "Minh An": both students match"""
        students = [_student("s1", "Minh An"), _student("s4", "An")]
        events = [
            make_event("e1", "Toán - Minh An", datetime(2025, 10, 7, 18)),
            make_event("e2", "Toán - Bảo Ngọc", datetime(2025, 10, 8, 18)),
        ]
        assert find_ambiguous_titles(students, events) == {"e1": ["s1", "s4"]}

    def test_linked_events_are_never_ambiguous(self):
        students = [_student("s1", "Minh An"), _student("s4", "An")]
        events = [make_event("e1", "Toán - Minh An", datetime(2025, 10, 7, 18), student_id="s1")]
        assert find_ambiguous_titles(students, events) == {}

    def test_link_events(self, caplog):
        """Unique matches are linked, ambiguous ones stay unlinked with a warning"""
        students = [_student("s1", "Minh An"), _student("s4", "An"), _student("s2", "Bảo Ngọc")]
        events = [
            make_event("e1", "Toán - Minh An", datetime(2025, 10, 7, 18)),
            make_event("e2", "Tiếng Pháp - Bảo Ngọc", datetime(2025, 10, 8, 9)),
            make_event("e3", "Họp phụ huynh", datetime(2025, 10, 9, 9)),
            make_event("e4", "Toán", datetime(2025, 10, 9, 9), student_id="s4"),
        ]

        with caplog.at_level(logging.WARNING):
            linked = link_events(students, events)

        assert [e.student_id for e in linked] == [None, "s2", None, "s4"]
        assert "e1" in caplog.text
