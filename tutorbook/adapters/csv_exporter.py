"""CSV Report Exporter Adapter

ReportExporter ABC implementation with the csv module.

Column order is part of the export contract:
  Parent, Student, Class, Fee/Session, Session Count, Total Amount, Day List
A trailing row carries the grand totals.
"""

from __future__ import annotations

import csv
import io
import logging

from tutorbook.domain.models import MonthlyReport, ReportTotals
from tutorbook.domain.ports import ReportExporter
from tutorbook.formatting import format_vnd

logger = logging.getLogger(__name__)

COLUMNS = (
    "Parent",
    "Student",
    "Class",
    "Fee/Session",
    "Session Count",
    "Total Amount",
    "Day List",
)
TOTAL_LABEL = "Tổng Cộng"


class CsvReportExporter(ReportExporter):
    """
    CSV export of the monthly report table.

    Amounts use the display format ("300.000đ"). With bom=True the output
    starts with a UTF-8 BOM so spreadsheet apps detect the encoding.
    """

    def __init__(self, bom: bool = True, include_totals: bool = True) -> None:
        self._bom = bom
        self._include_totals = include_totals

    def render(self, reports: list[MonthlyReport], totals: ReportTotals) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\r\n")
        writer.writerow(COLUMNS)

        for r in reports:
            writer.writerow(
                [
                    r.parent_name,
                    r.student_name,
                    r.class_name,
                    format_vnd(r.fee_per_session),
                    r.total_sessions,
                    format_vnd(r.total_amount),
                    r.day_list,
                ]
            )

        if self._include_totals and reports:
            writer.writerow(
                [
                    TOTAL_LABEL,
                    "",
                    "",
                    "",
                    totals.total_sessions,
                    format_vnd(totals.total_amount),
                    "",
                ]
            )

        result = buf.getvalue()
        logger.info("Rendered CSV: reports=%d, chars=%d", len(reports), len(result))
        return ("\ufeff" + result) if self._bom else result
