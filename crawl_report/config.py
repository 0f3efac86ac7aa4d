"""Environment-driven runtime settings for the report job."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from urllib.parse import quote_plus
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from crawl_report.domain.errors import InvalidInputError

DEFAULT_CHANNEL = "ben-test"
DEFAULT_USERNAME = "IPSHARK-BOT"
DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_CRON = "5 2 * * *"
DEFAULT_REPORT = "crawler_status"

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Settings:
    database_url: str | None
    webhook_url: str | None
    channel: str = DEFAULT_CHANNEL
    username: str = DEFAULT_USERNAME
    timezone: str = DEFAULT_TIMEZONE
    http_timeout: int = 10
    cron: str = DEFAULT_CRON
    report_name: str = DEFAULT_REPORT

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidInputError(f"{name} must be an integer, got {value!r}") from exc


def _database_url_from_parts() -> str | None:
    host = os.getenv("DB_HOST", "").strip()
    database = os.getenv("DB_DATABASE", "").strip()
    if not host or not database:
        return None

    user = quote_plus(os.getenv("DB_USERNAME", ""))
    password = quote_plus(os.getenv("DB_PASSWORD", ""))
    port = _get_int_env("DB_PORT", 3306)
    credentials = f"{user}:{password}@" if user else ""
    return f"mysql+pymysql://{credentials}{host}:{port}/{database}"


def load_settings() -> Settings:
    """Resolve settings once from the process environment."""
    timezone = os.getenv("REPORT_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError(f"REPORT_TIMEZONE is not a known timezone: {timezone!r}") from exc

    settings = Settings(
        database_url=os.getenv("DATABASE_URL", "").strip() or _database_url_from_parts(),
        webhook_url=os.getenv("SLACK_WEBHOOK_URL", "").strip() or None,
        channel=os.getenv("SLACK_CHANNEL", "").strip() or DEFAULT_CHANNEL,
        username=os.getenv("SLACK_USERNAME", "").strip() or DEFAULT_USERNAME,
        timezone=timezone,
        http_timeout=_get_int_env("REPORT_HTTP_TIMEOUT", 10),
        cron=os.getenv("REPORT_CRON", "").strip() or DEFAULT_CRON,
        report_name=os.getenv("REPORT_NAME", "").strip() or DEFAULT_REPORT,
    )
    logger.info(
        "Resolved report settings (report=%s, timezone=%s, channel=%s, database_configured=%s, webhook_configured=%s)",
        settings.report_name,
        settings.timezone,
        settings.channel,
        settings.database_url is not None,
        settings.webhook_url is not None,
    )
    return settings
