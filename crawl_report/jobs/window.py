from __future__ import annotations

from datetime import datetime, timedelta

from crawl_report.domain.models import ReportWindow

QUERY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def hourly_slot_window(now: datetime, *, start_hour: int = 1, end_hour: int = 2) -> ReportWindow:
    """Return the nightly crawl slot the report covers.

    On odd days of the month (except the 31st) the slot reported is
    yesterday's; otherwise it is today's.
    """
    day = now.date()
    if now.day % 2 == 1 and now.day != 31:
        day -= timedelta(days=1)

    base = now.replace(year=day.year, month=day.month, day=day.day, minute=0, second=0, microsecond=0)
    return ReportWindow(start=base.replace(hour=start_hour), end=base.replace(hour=end_hour))


def trailing_days_window(now: datetime, *, days: int) -> ReportWindow:
    end = now.replace(microsecond=0)
    return ReportWindow(start=end - timedelta(days=days), end=end)


def query_params(window: ReportWindow) -> dict[str, str]:
    return {
        "start_time": window.start.strftime(QUERY_TIME_FORMAT),
        "end_time": window.end.strftime(QUERY_TIME_FORMAT),
    }
