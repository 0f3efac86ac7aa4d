from __future__ import annotations

from datetime import datetime, timezone

import pytest

from crawl_report.config import Settings
from crawl_report.domain.models import CountRow, ReportWindow


@pytest.fixture
def window() -> ReportWindow:
    return ReportWindow(
        start=datetime(2026, 2, 12, 1, 0, 0, tzinfo=timezone.utc),
        end=datetime(2026, 2, 12, 2, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def status_rows() -> list[CountRow]:
    return [
        CountRow(key="finished", count=80),
        CountRow(key="failure", count=15),
        CountRow(key="cancelled", count=5),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        webhook_url="https://hooks.slack.com/services/T000/B000/secret",
        channel="crawler-alerts",
        username="IPSHARK-BOT",
        timezone="UTC",
    )
