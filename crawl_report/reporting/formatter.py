"""Render crawl summaries as Slack messages with a fixed-width table."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence, Union

from crawl_report.domain.errors import FormatError
from crawl_report.domain.models import CountRow, ReportSection, Summary
from crawl_report.reporting.summary import format_percentage

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
KEY_WIDTH = 10
COUNT_WIDTH = 10
CODE_FENCE = "```"

SummaryLike = Union[Summary, Mapping[str, Any]]

_FIELD_ALIASES = {
    "start_time": ("start_time", "startTime"),
    "end_time": ("end_time", "endTime"),
    "finished_percentage": ("finished_percentage", "finishedPercentage"),
    "unsuccessful_percentage": ("unsuccessful_percentage", "unsuccessfulPercentage"),
}


def _summary_field(summary: SummaryLike, name: str) -> Any:
    if isinstance(summary, Summary):
        return getattr(summary, name)
    for alias in _FIELD_ALIASES[name]:
        if summary.get(alias) is not None:
            return summary[alias]
    return None


def _timestamp(summary: SummaryLike, name: str) -> datetime:
    value = _summary_field(summary, name)
    if value is None:
        raise FormatError(f"Summary is missing required field {name!r}")
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise FormatError(f"Summary field {name!r} is not an ISO-8601 timestamp: {value!r}") from exc
    raise FormatError(f"Summary field {name!r} must be a datetime, got {type(value).__name__}")


def _percentage_text(value: Any) -> str:
    if isinstance(value, bool):
        raise FormatError(f"Percentage must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        return format_percentage(value)
    if isinstance(value, (int, float)):
        return format_percentage(Decimal(str(value)))
    return str(value)


def format_row(row: CountRow) -> str:
    return f"{row.key:<{KEY_WIDTH}}{row.count:>{COUNT_WIDTH}}\n"


def format_title(summary: SummaryLike, *, label: str, icon: str) -> str:
    start = _timestamp(summary, "start_time")
    end = _timestamp(summary, "end_time")

    if start.date() == end.date():
        window = f"{start.strftime(DATE_FORMAT)} ({start.strftime(TIME_FORMAT)} to {end.strftime(TIME_FORMAT)})"
    else:
        full = f"{DATE_FORMAT} {TIME_FORMAT}"
        window = f"{start.strftime(full)} to {end.strftime(full)}"

    title = f"{icon}  *{label}*: {window}\n"

    finished = _summary_field(summary, "finished_percentage")
    unsuccessful = _summary_field(summary, "unsuccessful_percentage")
    if finished is not None:
        title += f":white_check_mark:  *Finished*: {_percentage_text(finished)}%\n"
    if unsuccessful is not None:
        title += f":x:  *Unsuccessful*: {_percentage_text(unsuccessful)}%\n"
    return title


def format_body(sections: Sequence[ReportSection]) -> str:
    rule = "-" * (KEY_WIDTH + COUNT_WIDTH)
    blocks: list[str] = []
    for section in sections:
        block = ""
        if section.title is not None:
            block += f"{section.title}\n{rule}\n"
        block += "".join(format_row(row) for row in section.rows)
        blocks.append(block)
    return "\n".join(blocks)


def format_report(
    sections: Sequence[CountRow] | Sequence[ReportSection],
    summary: SummaryLike,
    *,
    label: str = "Crawler Alert",
    icon: str = ":alarm_clock:",
) -> str:
    """Build the alert text: title lines followed by a fenced table.

    ``sections`` is either a flat row sequence (one untitled table) or a
    sequence of ReportSection. Titled sections get a header and an underline
    and are separated by one blank line. Only the summary's own timestamps are
    used, so identical inputs always produce identical text.
    """
    if not isinstance(summary, (Summary, Mapping)):
        raise FormatError(f"Summary must be a Summary or a mapping, got {type(summary).__name__}")

    items = list(sections)
    if all(isinstance(item, CountRow) for item in items):
        resolved = [ReportSection(title=None, rows=items)] if items else []
    elif all(isinstance(item, ReportSection) for item in items):
        resolved = items
    else:
        raise FormatError("Sections must be all CountRow or all ReportSection items")

    title = format_title(summary, label=label, icon=icon)
    return title + CODE_FENCE + format_body(resolved) + CODE_FENCE
