"""Ports - service interface definitions (ABC)

Each port defines the contract with an external collaborator.
Adapters inherit from these ABCs and must implement every abstract method,
so a missing implementation is detected at instantiation time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tutorbook.domain.models import (
    CalendarEvent,
    MonthlyReport,
    Notice,
    NoticeAnalysis,
    ReportTotals,
    Student,
)


class StudentDirectory(ABC):
    """Student records (fixtures, spreadsheet, etc.)"""

    @abstractmethod
    def load_students(self) -> list[Student]:
        """Load every student in display order"""
        pass


class EventSource(ABC):
    """Class schedule (Google Calendar, fixtures, etc.)"""

    @abstractmethod
    def list_events(self) -> list[CalendarEvent]:
        """List every known class event"""
        pass


class NoticeSource(ABC):
    """Inbound notices (mailbox label, fixtures, etc.)"""

    @abstractmethod
    def list_notices(self) -> list[Notice]:
        """List notices to reconcile, oldest first"""
        pass


class NoticeAnalyzer(ABC):
    """Intent extraction from free text (Gemini or another LLM)"""

    @abstractmethod
    def analyze(self, notice: Notice, student_names: list[str]) -> NoticeAnalysis:
        """Extract the structured intent. Raises AnalysisError on failure."""
        pass


class ReportExporter(ABC):
    """Tabular export of monthly reports"""

    @abstractmethod
    def render(self, reports: list[MonthlyReport], totals: ReportTotals) -> str:
        """Render the report table as text (CSV etc.)"""
        pass
