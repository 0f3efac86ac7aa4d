"""Structured JSON logging helpers for report runs."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit


class JsonFormatter(logging.Formatter):
    """Format log records as JSON with the report run fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "report": getattr(record, "report", "unknown"),
            "workflow_step": getattr(record, "workflow_step", "unknown"),
            "status": getattr(record, "status", record.levelname.lower()),
        }

        for key in ("row_count", "webhook", "error_code", "error_message"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        message = record.getMessage()
        if message:
            payload["message"] = message

        return json.dumps(payload, ensure_ascii=False)


def mask_webhook_url(url: str | None) -> str:
    """Keep the webhook host visible and hide the secret path."""
    if not url:
        return ""
    parts = urlsplit(url)
    if not parts.netloc:
        return "***"
    return f"{parts.scheme}://{parts.netloc}/***"


def get_structured_logger(name: str = "crawl_report.events") -> logging.Logger:
    """Return a logger configured to emit JSON records."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_report_event(
    logger: logging.Logger,
    *,
    report: str,
    workflow_step: str,
    status: str,
    message: str = "",
    row_count: int | None = None,
    webhook: str | None = None,
    error_code: str | None = None,
    error_message: str | None = None,
) -> None:
    """Emit a structured report event."""
    extra: dict[str, Any] = {
        "report": report,
        "workflow_step": workflow_step,
        "status": status,
        "row_count": row_count,
        "webhook": mask_webhook_url(webhook) if webhook else None,
        "error_code": error_code,
        "error_message": error_message,
    }
    level = logging.ERROR if error_code else logging.INFO
    logger.log(level, message, extra=extra)
