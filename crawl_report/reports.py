"""Registry of the crawl report variants the job can produce."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable

from crawl_report.domain.errors import InvalidInputError
from crawl_report.domain.models import DEFAULT_STATUS_RULE, ClassificationRule, ReportWindow
from crawl_report.jobs.window import hourly_slot_window, trailing_days_window

WindowPolicy = Callable[[datetime], ReportWindow]


@dataclass(slots=True, frozen=True)
class ReportDefinition:
    name: str
    label: str
    icon: str
    sql: str
    window: WindowPolicy
    key_column: str = "status"
    count_column: str = "Total Count"
    section_column: str | None = None
    rule: ClassificationRule | None = None


CRAWLER_STATUS = ReportDefinition(
    name="crawler_status",
    label="Crawler Alert",
    icon=":alarm_clock:",
    sql=(
        'select status, count(*) as "Total Count" from crawls '
        "where created_at > :start_time and created_at <= :end_time "
        "group by status"
    ),
    window=hourly_slot_window,
    rule=DEFAULT_STATUS_RULE,
)

DAILY_TREND = ReportDefinition(
    name="daily_trend",
    label="Crawl Trend",
    icon=":chart_with_upwards_trend:",
    sql=(
        'select date(created_at) as day, count(*) as "Total Count" from crawls '
        "where created_at > :start_time and created_at <= :end_time "
        "group by date(created_at) order by day"
    ),
    window=partial(trailing_days_window, days=7),
    key_column="day",
)

PENDING_LISTINGS = ReportDefinition(
    name="pending_listings",
    label="Pending Listings",
    icon=":hourglass:",
    sql=(
        'select platform, crawler, count(*) as "Total Count" from listings '
        "where status = 'pending' and created_at > :start_time and created_at <= :end_time "
        "group by platform, crawler order by platform, crawler"
    ),
    window=partial(trailing_days_window, days=1),
    key_column="crawler",
    section_column="platform",
)

REPORTS: dict[str, ReportDefinition] = {
    report.name: report for report in (CRAWLER_STATUS, DAILY_TREND, PENDING_LISTINGS)
}


def get_report(name: str) -> ReportDefinition:
    try:
        return REPORTS[name]
    except KeyError:
        known = ", ".join(sorted(REPORTS))
        raise InvalidInputError(f"Unknown report {name!r}; expected one of: {known}") from None
