"""Notice API routes

POST /api/notices/scan  → 200 {log, applied}
                        → 503 when Gemini is not configured
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tutorbook.entrypoints.api.deps import get_workspace
from tutorbook.services.workspace import Workspace

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notices", tags=["notices"])


class ScanResponse(BaseModel):
    log: list[str]
    applied: list[str]


@router.post("/scan", response_model=ScanResponse)
def scan_notices(workspace: Workspace = Depends(get_workspace)) -> ScanResponse:
    """
    Reconcile every notice with Gemini and keep the resulting cancellations.

    The next GET /api/reports reflects the updated events.
    """
    result = workspace.scan_notices()
    logger.info("Notice scan finished: applied=%d", len(result.applied))
    return ScanResponse(log=result.log, applied=result.applied)
