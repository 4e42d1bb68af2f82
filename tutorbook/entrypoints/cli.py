#!/usr/bin/env python3
"""CLI Entrypoint - run from the command line

Usage:
    python -m tutorbook.entrypoints.cli report [--month 10] [--year 2025]
        [--scan-notices] [--csv report.csv]
    python -m tutorbook.entrypoints.cli dashboard

Environment:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    PROJECT_ID: Google Cloud project for Gemini (needed by --scan-notices)
    K_SERVICE / CLOUD_RUN_JOB: switch to JSON logs on Cloud Run
"""

import argparse
import logging
import sys
from datetime import date

from tutorbook.adapters.csv_exporter import CsvReportExporter
from tutorbook.domain.errors import ConfigLoadError
from tutorbook.entrypoints.factory import create_workspace
from tutorbook.formatting import format_vnd
from tutorbook.logging_config import setup_logging
from tutorbook.services.billing import summarize
from tutorbook.services.workspace import Workspace

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tutorbook", description="Monthly tuition reports for private tutors"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Per-student fees for one month")
    report.add_argument(
        "--month",
        type=int,
        choices=range(1, 13),
        default=date.today().month,
        metavar="1-12",
        help="Month of year (default: current month)",
    )
    report.add_argument(
        "--year",
        type=int,
        default=None,
        help="Only count events of this year (default: any year)",
    )
    report.add_argument(
        "--scan-notices",
        action="store_true",
        help="Reconcile parent emails with Gemini before computing",
    )
    report.add_argument(
        "--csv",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the report as CSV ('-' for stdout)",
    )

    sub.add_parser("dashboard", help="Totals and revenue per class")
    return parser


def run_report(workspace: Workspace, args: argparse.Namespace) -> None:
    """Compute (and optionally export) the monthly report"""
    if args.scan_notices:
        result = workspace.scan_notices()
        for line in result.log:
            logger.info("%s", line)
        logger.info("Notice scan applied %d cancellation(s)", len(result.applied))

    reports = workspace.reports(args.month, args.year)
    totals = summarize(reports)

    for i, r in enumerate(reports, 1):
        logger.info(
            "[%d] %s / %s (%s) fee=%s sessions=%d total=%s days=%s",
            i,
            r.parent_name,
            r.student_name,
            r.class_name,
            format_vnd(r.fee_per_session),
            r.total_sessions,
            format_vnd(r.total_amount),
            r.day_list or "-",
        )
    logger.info(
        "Total: sessions=%d amount=%s", totals.total_sessions, format_vnd(totals.total_amount)
    )

    if args.csv:
        content = CsvReportExporter(bom=args.csv != "-").render(reports, totals)
        if args.csv == "-":
            sys.stdout.write(content)
        else:
            with open(args.csv, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            logger.info("CSV written to %s", args.csv)


def run_dashboard(workspace: Workspace) -> None:
    stats = workspace.dashboard()
    logger.info(
        "Classes held=%d cancelled=%d revenue=%s",
        stats.total_classes,
        stats.cancelled_classes,
        format_vnd(stats.total_revenue),
    )
    for c in stats.classes:
        logger.info(
            "  %s: students=%d revenue=%s",
            c.class_name,
            c.student_count,
            format_vnd(c.revenue),
        )


def main(argv: list[str] | None = None) -> None:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    logger.info("Tutorbook - Starting")

    try:
        workspace = create_workspace()

        if args.command == "report":
            run_report(workspace, args)
        else:
            run_dashboard(workspace)

    except ConfigLoadError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(2)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
