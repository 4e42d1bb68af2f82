"""Services layer - billing logic"""

from tutorbook.services.billing import build_dashboard, build_reports, summarize
from tutorbook.services.classifier import is_billable
from tutorbook.services.notice_reconciler import NoticeReconciler
from tutorbook.services.workspace import Workspace

__all__ = [
    "is_billable",
    "build_reports",
    "summarize",
    "build_dashboard",
    "NoticeReconciler",
    "Workspace",
]
