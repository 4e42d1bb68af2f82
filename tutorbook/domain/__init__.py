"""Domain layer - models and interface definitions with no external dependencies"""

from tutorbook.domain.errors import (
    AnalysisError,
    ConfigLoadError,
    MissingCredentialsError,
    TutorbookError,
)
from tutorbook.domain.models import (
    CalendarEvent,
    ClassSummary,
    DashboardStats,
    EventStatus,
    MonthlyReport,
    Notice,
    NoticeAction,
    NoticeAnalysis,
    PricingModel,
    ReconcileResult,
    ReportTotals,
    Student,
)
from tutorbook.domain.ports import (
    EventSource,
    NoticeAnalyzer,
    NoticeSource,
    ReportExporter,
    StudentDirectory,
)

__all__ = [
    # Models
    "Student",
    "CalendarEvent",
    "EventStatus",
    "PricingModel",
    "Notice",
    "NoticeAction",
    "NoticeAnalysis",
    "MonthlyReport",
    "ReportTotals",
    "ReconcileResult",
    "ClassSummary",
    "DashboardStats",
    # Errors
    "TutorbookError",
    "ConfigLoadError",
    "MissingCredentialsError",
    "AnalysisError",
    # Ports
    "StudentDirectory",
    "EventSource",
    "NoticeSource",
    "NoticeAnalyzer",
    "ReportExporter",
]
