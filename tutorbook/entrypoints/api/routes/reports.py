"""Report API routes

GET /api/reports?month=&year=         → 200 {month, year, reports, totals}
GET /api/reports/export?month=&year=  → text/csv attachment
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel

from tutorbook.adapters.csv_exporter import CsvReportExporter
from tutorbook.domain.models import CalendarEvent, MonthlyReport
from tutorbook.entrypoints.api.deps import get_report_exporter, get_workspace
from tutorbook.formatting import format_vnd
from tutorbook.services.billing import summarize
from tutorbook.services.classifier import is_billable
from tutorbook.services.workspace import Workspace

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reports", tags=["reports"])


class EventResponse(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    description: str
    tags: list[str]
    status: str
    billable: bool


class ReportResponse(BaseModel):
    student_id: str
    parent_name: str
    student_name: str
    class_name: str
    fee_per_session: float
    fee_per_session_display: str
    total_sessions: int
    total_amount: float
    total_amount_display: str
    day_list: str
    details: list[EventResponse]


class TotalsResponse(BaseModel):
    total_sessions: int
    total_amount: float
    total_amount_display: str


class ReportListResponse(BaseModel):
    month: int
    year: int | None
    reports: list[ReportResponse]
    totals: TotalsResponse


def _event_response(e: CalendarEvent) -> EventResponse:
    return EventResponse(
        id=e.id,
        title=e.title,
        start=e.start,
        end=e.end,
        description=e.description,
        tags=list(e.tags),
        status=e.status.value,
        billable=is_billable(e),
    )


def _report_response(r: MonthlyReport) -> ReportResponse:
    return ReportResponse(
        student_id=r.student_id,
        parent_name=r.parent_name,
        student_name=r.student_name,
        class_name=r.class_name,
        fee_per_session=r.fee_per_session,
        fee_per_session_display=format_vnd(r.fee_per_session),
        total_sessions=r.total_sessions,
        total_amount=r.total_amount,
        total_amount_display=format_vnd(r.total_amount),
        day_list=r.day_list,
        details=[_event_response(e) for e in r.details],
    )


@router.get("", response_model=ReportListResponse)
def list_reports(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = None,
    workspace: Workspace = Depends(get_workspace),
) -> ReportListResponse:
    """
    Per-student reports of one month, recomputed on every request.

    Query parameters:
        month: 1..12 (default: current month)
        year: only events of this year (default: any year)
    """
    month = month or date.today().month
    reports = workspace.reports(month, year)
    totals = summarize(reports)

    return ReportListResponse(
        month=month,
        year=year,
        reports=[_report_response(r) for r in reports],
        totals=TotalsResponse(
            total_sessions=totals.total_sessions,
            total_amount=totals.total_amount,
            total_amount_display=format_vnd(totals.total_amount),
        ),
    )


@router.get("/export")
def export_reports(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = None,
    workspace: Workspace = Depends(get_workspace),
    exporter: CsvReportExporter = Depends(get_report_exporter),
) -> Response:
    """Reports of one month as a CSV download"""
    month = month or date.today().month
    reports = workspace.reports(month, year)
    content = exporter.render(reports, summarize(reports))

    filename = f"hoc-phi-{year}-{month:02d}.csv" if year else f"hoc-phi-{month:02d}.csv"
    logger.info("Exporting %d reports as %s", len(reports), filename)
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
