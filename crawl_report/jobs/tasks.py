"""Task functions executed by the scheduler."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from crawl_report.config import Settings, load_settings
from crawl_report.db.session import create_db_engine, fetch_count_rows
from crawl_report.domain.errors import UpstreamFailure
from crawl_report.domain.models import CountRow, ReportWindow
from crawl_report.jobs.window import query_params
from crawl_report.notify.slack import post_message
from crawl_report.reporting.formatter import format_report
from crawl_report.reporting.sections import partition_rows
from crawl_report.reporting.summary import compute_summary, totals_only
from crawl_report.reports import ReportDefinition, get_report
from crawl_report.utils.logging import get_structured_logger, log_report_event

logger = logging.getLogger(__name__)

QueryRow = Mapping[str, Any]
RowFetcher = Callable[[str, dict[str, str]], list[QueryRow]]
Notifier = Callable[[str], bool]


def _database_fetcher(settings: Settings) -> RowFetcher:
    def _fetch(sql: str, params: dict[str, str]) -> list[QueryRow]:
        engine = create_db_engine(settings)
        try:
            return fetch_count_rows(engine, sql, params)
        finally:
            engine.dispose()

    return _fetch


def build_report_text(
    definition: ReportDefinition,
    raw_rows: list[QueryRow],
    window: ReportWindow,
) -> str:
    """Turn query rows into the final report text for one definition."""
    rows = [
        CountRow.from_mapping(
            row,
            key_column=definition.key_column,
            count_column=definition.count_column,
            section_column=definition.section_column,
        )
        for row in raw_rows
    ]

    if definition.rule is not None:
        summary = compute_summary(rows, window=window, rule=definition.rule)
    else:
        summary = totals_only(rows, window=window)

    return format_report(
        partition_rows(rows),
        summary,
        label=definition.label,
        icon=definition.icon,
    )


def run_report(
    name: str | None = None,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
    row_fetcher: RowFetcher | None = None,
    notifier: Notifier | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Query, summarize, format and post one report.

    Query failures raise UpstreamFailure and calculation or formatting errors
    propagate unchanged. A failed notification is logged and the report is
    still returned.
    """
    settings = settings or load_settings()
    definition = get_report(name or settings.report_name)
    fetch = row_fetcher or _database_fetcher(settings)
    notify = notifier or (lambda text: post_message(settings, text))
    events = get_structured_logger()

    current = now.astimezone(settings.tz) if now else datetime.now(tz=settings.tz)
    window = definition.window(current)
    logger.info(
        "Running report %s for window %s to %s",
        definition.name,
        window.start.isoformat(),
        window.end.isoformat(),
    )

    try:
        raw_rows = fetch(definition.sql, query_params(window))
    except UpstreamFailure as exc:
        log_report_event(
            events,
            report=definition.name,
            workflow_step="query",
            status="failed",
            message="Count query failed",
            error_code="QUERY_FAILED",
            error_message=str(exc),
        )
        raise
    log_report_event(
        events,
        report=definition.name,
        workflow_step="query",
        status="fetched",
        message="Count query completed",
        row_count=len(raw_rows),
    )

    text = build_report_text(definition, raw_rows, window)
    logger.info("Report text:\n%s", text)

    if dry_run:
        log_report_event(
            events,
            report=definition.name,
            workflow_step="notify",
            status="skipped",
            message="Dry-run: notification skipped",
        )
    else:
        error_message = None
        try:
            delivered = notify(text)
        except Exception as exc:  # noqa: BLE001
            delivered = False
            error_message = str(exc)
        if delivered:
            log_report_event(
                events,
                report=definition.name,
                workflow_step="notify",
                status="sent",
                message="Notification delivered",
                webhook=settings.webhook_url,
            )
        else:
            log_report_event(
                events,
                report=definition.name,
                workflow_step="notify",
                status="failed",
                message="Notification not delivered; report still returned",
                webhook=settings.webhook_url,
                error_code="NOTIFY_FAILED",
                error_message=error_message,
            )

    return {"statusCode": 200, "body": text}
