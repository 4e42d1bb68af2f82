"""Logging setup

Plain text locally, Cloud Logging JSON on Cloud Run (K_SERVICE / CLOUD_RUN_JOB).

Context passed as extra={"extra_fields": {...}} shows up in both formats.
Notice, event, student and request ids become Cloud Logging labels so one
notice can be followed from analysis to cancellation; other keys are merged
into the JSON payload.

Environment:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
"""

import json
import logging
import os
from datetime import UTC, datetime

CONTEXT_LABELS = ("notice_id", "event_id", "student_id", "request_id")

_SEVERITIES = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_LABELS_KEY = "logging.googleapis.com/labels"
_SOURCE_KEY = "logging.googleapis.com/sourceLocation"


def _context(record: logging.LogRecord) -> dict:
    return dict(getattr(record, "extra_fields", None) or {})


class CloudLoggingFormatter(logging.Formatter):
    """One JSON object per line, the structured format Cloud Run forwards"""

    def format(self, record: logging.LogRecord) -> str:
        fields = _context(record)
        labels = {key: str(fields.pop(key)) for key in CONTEXT_LABELS if key in fields}

        entry: dict = {
            "severity": record.levelname if record.levelname in _SEVERITIES else "DEFAULT",
            "message": record.getMessage(),
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(
                timespec="milliseconds"
            ),
            "logger": record.name,
            _SOURCE_KEY: {
                "file": record.pathname,
                "line": str(record.lineno),
                "function": record.funcName,
            },
        }
        entry.update(fields)
        if labels:
            entry[_LABELS_KEY] = labels
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Text lines with the record's context appended as [key=value ...]"""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        fields = _context(record)
        if not fields:
            return line
        return f"{line} [{' '.join(f'{k}={v}' for k, v in fields.items())}]"


def _on_cloud_run() -> bool:
    return bool(os.getenv("K_SERVICE") or os.getenv("CLOUD_RUN_JOB"))


def setup_logging(level: str | None = None) -> None:
    """Install a single handler on the root logger

    Args:
        level: overrides LOG_LEVEL when given (e.g. "DEBUG" from --verbose)
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    handler = logging.StreamHandler()
    handler.setFormatter(CloudLoggingFormatter() if _on_cloud_run() else ContextTextFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
