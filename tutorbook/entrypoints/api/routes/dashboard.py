"""Dashboard API routes

GET  /api/dashboard  → 200 DashboardResponse
POST /api/sync       → 200 reload students / events / notices from the sources
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tutorbook.entrypoints.api.deps import get_workspace
from tutorbook.formatting import format_vnd
from tutorbook.services.workspace import Workspace

router = APIRouter(tags=["dashboard"])


class ClassResponse(BaseModel):
    class_name: str
    student_count: int
    revenue: float
    revenue_display: str
    student_ids: list[str]


class DashboardResponse(BaseModel):
    total_classes: int
    cancelled_classes: int
    total_revenue: float
    total_revenue_display: str
    classes: list[ClassResponse]


class SyncResponse(BaseModel):
    students: int
    events: int
    notices: int


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(workspace: Workspace = Depends(get_workspace)) -> DashboardResponse:
    """Overview across all loaded events"""
    stats = workspace.dashboard()
    return DashboardResponse(
        total_classes=stats.total_classes,
        cancelled_classes=stats.cancelled_classes,
        total_revenue=stats.total_revenue,
        total_revenue_display=format_vnd(stats.total_revenue),
        classes=[
            ClassResponse(
                class_name=c.class_name,
                student_count=c.student_count,
                revenue=c.revenue,
                revenue_display=format_vnd(c.revenue),
                student_ids=list(c.student_ids),
            )
            for c in stats.classes
        ],
    )


@router.post("/sync", response_model=SyncResponse)
def sync(workspace: Workspace = Depends(get_workspace)) -> SyncResponse:
    """Reload from the sources. Cancellations applied from notices are reset."""
    workspace.sync()
    return SyncResponse(
        students=len(workspace.students),
        events=len(workspace.events),
        notices=len(workspace.notices),
    )
