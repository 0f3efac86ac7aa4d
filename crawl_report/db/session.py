"""SQLAlchemy engine creation and grouped-count queries."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from crawl_report.config import Settings
from crawl_report.domain.errors import UpstreamFailure

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    if not settings.database_url:
        raise UpstreamFailure("No database configured; set DATABASE_URL or DB_HOST/DB_DATABASE")
    return create_engine(settings.database_url, pool_pre_ping=True)


def fetch_count_rows(engine: Engine, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
    """Run a grouped-count query and return rows as plain dicts, in query order."""
    try:
        with engine.connect() as connection:
            result = connection.execute(text(sql), dict(params or {}))
            rows = [dict(row) for row in result.mappings()]
    except SQLAlchemyError as exc:
        raise UpstreamFailure(f"Count query failed: {exc}") from exc

    logger.info("Fetched %s grouped-count rows", len(rows))
    return rows
