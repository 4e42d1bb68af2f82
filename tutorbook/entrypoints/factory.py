"""Factory - dependency injection wiring

Builds every adapter and service and returns a ready Workspace.
"""

import logging

import vertexai
from vertexai.generative_models import GenerativeModel

from tutorbook.adapters.fixtures import (
    FixtureEventSource,
    FixtureNoticeSource,
    FixtureStudentDirectory,
)
from tutorbook.adapters.gemini import GeminiNoticeAnalyzer
from tutorbook.config import AppConfig
from tutorbook.services.notice_reconciler import NoticeReconciler
from tutorbook.services.workspace import Workspace

logger = logging.getLogger(__name__)


def create_notice_reconciler(config: AppConfig) -> NoticeReconciler | None:
    """
    Build the Gemini-backed reconciler.

    Returns:
        NoticeReconciler, or None when PROJECT_ID is not set
    """
    if not config.ai_enabled:
        logger.warning("PROJECT_ID not set, notice scanning is disabled")
        return None

    logger.info(
        "Initializing Vertex AI: project=%s location=%s model=%s",
        config.project_id,
        config.vertex_ai_location,
        config.gemini_model,
    )
    vertexai.init(project=config.project_id, location=config.vertex_ai_location)
    model = GenerativeModel(config.gemini_model)

    return NoticeReconciler(
        analyzer=GeminiNoticeAnalyzer(model),
        timeout_seconds=config.ai_timeout_seconds,
    )


def create_workspace(config: AppConfig | None = None, sync: bool = True) -> Workspace:
    """
    Create the Workspace (wires all dependencies).

    Args:
        config: application settings (read from the environment when None)
        sync: load the sources right away

    Returns:
        Workspace: ready to compute reports

    Raises:
        ConfigLoadError: a setting is invalid
    """
    if config is None:
        config = AppConfig.from_env()

    logger.info("Creating workspace: timezone=%s", config.timezone)

    workspace = Workspace(
        students=FixtureStudentDirectory(),
        events=FixtureEventSource(timezone=config.timezone),
        notices=FixtureNoticeSource(timezone=config.timezone),
        reconciler=create_notice_reconciler(config),
    )
    if sync:
        workspace.sync()

    logger.info("Workspace created successfully")
    return workspace
