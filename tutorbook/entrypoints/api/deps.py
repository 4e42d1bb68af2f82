"""FastAPI dependency injection

Builds the process-wide Workspace once. Routes receive it through
Depends(get_workspace), which tests replace via dependency_overrides.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from tutorbook.adapters.csv_exporter import CsvReportExporter
from tutorbook.entrypoints.factory import create_workspace
from tutorbook.services.workspace import Workspace

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_workspace() -> Workspace:
    """Workspace singleton (created and synced on first use)"""
    logger.info("Initializing workspace for API")
    return create_workspace()


def get_report_exporter() -> CsvReportExporter:
    return CsvReportExporter()
