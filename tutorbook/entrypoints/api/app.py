"""FastAPI application

Tutorbook billing dashboard backend API.
Authentication is delegated to the hosting platform and not handled here.

Endpoints:
  GET    /health
  GET    /api/reports?month=&year=
  GET    /api/reports/export?month=&year=   (text/csv)
  GET    /api/dashboard
  POST   /api/sync
  POST   /api/notices/scan
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from tutorbook.domain.errors import ConfigLoadError
from tutorbook.entrypoints.api.routes import dashboard, notices, reports
from tutorbook.logging_config import setup_logging

REQUEST_ID_HEADER = "X-Request-ID"

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tutorbook API",
    description="Monthly tuition billing for private tutors",
    version="1.0.0",
)


@app.exception_handler(ConfigLoadError)
async def _config_error(request: Request, exc: ConfigLoadError) -> JSONResponse:
    """Missing Gemini project etc.: the feature is unavailable, not broken"""
    logger.error(
        "Configuration error on %s: %s",
        request.url.path,
        exc,
        extra={"extra_fields": {"request_id": getattr(request.state, "request_id", None)}},
    )
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Added before CORSMiddleware, so it runs inside it and even a 500 carries the
# CORS and request id headers the dashboard needs to show the error.
@app.middleware("http")
async def _request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    request.state.request_id = request_id

    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled exception: %s %s",
            request.method,
            request.url.path,
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                }
            },
        )
        response = JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "request_id": request_id},
        )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _cors_origins() -> list[str]:
    """CORS_ORIGINS (comma separated), else the local dashboard dev server"""
    origins = [o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",")]
    return [o for o in origins if o] or ["http://localhost:3000"]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", REQUEST_ID_HEADER],
    # the CSV download name and the error reference are read by the frontend
    expose_headers=["Content-Disposition", REQUEST_ID_HEADER],
)

app.include_router(reports.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(notices.router, prefix="/api")


@app.get("/health")
async def health() -> dict:
    """Health check (Cloud Run startup probe)"""
    return {"status": "ok"}


logger.info("Tutorbook API started")
