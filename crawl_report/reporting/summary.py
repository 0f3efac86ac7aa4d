"""Summary generation for crawl status reports."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from crawl_report.domain.errors import DivisionByZeroError
from crawl_report.domain.models import (
    DEFAULT_STATUS_RULE,
    OUTSTANDING,
    UNSUCCESSFUL,
    ClassificationRule,
    CountRow,
    ReportWindow,
    Summary,
)

_HUNDRED = Decimal(100)
_TWO_PLACES = Decimal("0.01")


def _percentage(part: int, total: int) -> Decimal:
    return (Decimal(part) * _HUNDRED / Decimal(total)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def format_percentage(value: Decimal) -> str:
    return f"{value:.2f}"


def compute_summary(
    rows: Iterable[CountRow],
    *,
    window: ReportWindow | None = None,
    rule: ClassificationRule = DEFAULT_STATUS_RULE,
) -> Summary:
    """Compute finished and unsuccessful percentages from grouped counts.

    Every row contributes to the total. Rows whose key is in the rule's
    unsuccessful or outstanding set also contribute to that bucket.
    Percentages are rounded half-up to two decimal places.

    Raises DivisionByZeroError when the rows sum to zero.
    """
    total = 0
    buckets = {UNSUCCESSFUL: 0, OUTSTANDING: 0}

    for row in rows:
        bucket = rule.bucket(row.key)
        if bucket is not None:
            buckets[bucket] += row.count
        total += row.count

    if total == 0:
        raise DivisionByZeroError("Cannot compute crawl percentages: total count is zero")

    return Summary(
        start_time=window.start if window else None,
        end_time=window.end if window else None,
        total=total,
        unsuccessful=buckets[UNSUCCESSFUL],
        outstanding=buckets[OUTSTANDING],
        finished_percentage=_percentage(total - buckets[OUTSTANDING], total),
        unsuccessful_percentage=_percentage(buckets[UNSUCCESSFUL], total),
    )


def totals_only(rows: Iterable[CountRow], *, window: ReportWindow | None = None) -> Summary:
    """Summary for reports without a classification rule; never divides."""
    return Summary(
        start_time=window.start if window else None,
        end_time=window.end if window else None,
        total=sum(row.count for row in rows),
    )
