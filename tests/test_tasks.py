from __future__ import annotations

from datetime import datetime, timezone

import pytest

from crawl_report.domain.errors import DivisionByZeroError, InvalidInputError, UpstreamFailure
from crawl_report.jobs.tasks import run_report

RUN_AT = datetime(2026, 2, 12, 9, 30, tzinfo=timezone.utc)


def _fetcher(rows, calls=None):
    def fetch(sql, params):
        if calls is not None:
            calls.append((sql, params))
        return rows

    return fetch


def test_crawler_status_report_is_posted_and_returned(settings) -> None:
    calls = []
    posted = []
    rows = [
        {"status": "scheduled", "Total Count": 10},
        {"status": "crawling", "Total Count": 5},
        {"status": "finished", "Total Count": 85},
    ]

    result = run_report(
        "crawler_status",
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher(rows, calls),
        notifier=lambda text: posted.append(text) or True,
    )

    assert result["statusCode"] == 200
    assert posted == [result["body"]]
    assert calls[0][1] == {"start_time": "2026-02-12 01:00:00", "end_time": "2026-02-12 02:00:00"}
    assert "*Finished*: 85.00%" in result["body"]
    assert "*Unsuccessful*: 0.00%" in result["body"]
    assert "scheduled         10\n" in result["body"]


def test_notification_failure_still_returns_report(settings) -> None:
    result = run_report(
        "crawler_status",
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher([{"status": "finished", "Total Count": 1}]),
        notifier=lambda text: False,
    )

    assert result["statusCode"] == 200
    assert result["body"].startswith(":alarm_clock:  *Crawler Alert*")


def test_dry_run_skips_notification(settings) -> None:
    def notifier(text):
        raise AssertionError("notifier should not be called in dry-run")

    result = run_report(
        "crawler_status",
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher([{"status": "finished", "Total Count": 1}]),
        notifier=notifier,
        dry_run=True,
    )

    assert "finished           1" in result["body"]


def test_query_failure_propagates_as_upstream_failure(settings) -> None:
    def failing_fetch(sql, params):
        raise UpstreamFailure("connection lost")

    with pytest.raises(UpstreamFailure):
        run_report("crawler_status", settings=settings, now=RUN_AT, row_fetcher=failing_fetch, notifier=lambda t: True)


def test_empty_status_window_fails_without_notifying(settings) -> None:
    posted = []

    with pytest.raises(DivisionByZeroError):
        run_report(
            "crawler_status",
            settings=settings,
            now=RUN_AT,
            row_fetcher=_fetcher([]),
            notifier=lambda text: posted.append(text) or True,
        )
    assert posted == []


def test_malformed_row_fails_the_run(settings) -> None:
    with pytest.raises(InvalidInputError):
        run_report(
            "crawler_status",
            settings=settings,
            now=RUN_AT,
            row_fetcher=_fetcher([{"status": "finished"}]),
            notifier=lambda text: True,
        )


def test_pending_listings_renders_platform_sections(settings) -> None:
    rows = [
        {"platform": "Amazon", "crawler": "listing", "Total Count": 3},
        {"platform": "RPI", "crawler": "listing", "Total Count": 2},
        {"platform": "RPI", "crawler": "search", "Total Count": 1},
    ]

    result = run_report(
        "pending_listings",
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher(rows),
        notifier=lambda text: True,
    )
    body = result["body"].split("```")[1]

    assert body.split("\n\n") == [
        "All\n--------------------\nlisting            5\nsearch             1",
        "Amazon\n--------------------\nlisting            3",
        "RPI\n--------------------\nlisting            2\nsearch             1\n",
    ]
    assert "*Finished*" not in result["body"]


def test_daily_trend_allows_empty_windows(settings) -> None:
    result = run_report(
        "daily_trend",
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher([]),
        notifier=lambda text: True,
    )

    assert result["body"] == (
        ":chart_with_upwards_trend:  *Crawl Trend*: 2026-02-05 09:30:00 to 2026-02-12 09:30:00\n``````"
    )


def test_report_name_defaults_to_settings(settings) -> None:
    result = run_report(
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher([{"status": "failure", "Total Count": 1}]),
        notifier=lambda text: True,
    )
    assert "*Unsuccessful*: 100.00%" in result["body"]


def test_raising_notifier_still_returns_report(settings) -> None:
    def notifier(text):
        raise ConnectionError("webhook down")

    result = run_report(
        "crawler_status",
        settings=settings,
        now=RUN_AT,
        row_fetcher=_fetcher([{"status": "finished", "Total Count": 4}]),
        notifier=notifier,
    )

    assert result["statusCode"] == 200
    assert "finished           4\n" in result["body"]
    assert "*Finished*: 100.00%" in result["body"]
