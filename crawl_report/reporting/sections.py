from __future__ import annotations

from typing import Sequence

from crawl_report.domain.models import CountRow, ReportSection


def partition_rows(rows: Sequence[CountRow], *, all_title: str = "All") -> list[ReportSection]:
    """Split rows into report sections by their section value.

    Rows without a section value yield a single untitled section. Otherwise
    an "All" section (counts summed per key) comes first, followed by one
    section per section value. Keys and sections keep first-seen order.
    """
    if not any(row.section is not None for row in rows):
        return [ReportSection(title=None, rows=list(rows))]

    combined: dict[str, int] = {}
    by_section: dict[str, list[CountRow]] = {}
    for row in rows:
        combined[row.key] = combined.get(row.key, 0) + row.count
        by_section.setdefault(row.section or "", []).append(row)

    sections = [
        ReportSection(
            title=all_title,
            rows=[CountRow(key=key, count=count) for key, count in combined.items()],
        )
    ]
    sections.extend(ReportSection(title=title, rows=items) for title, items in by_section.items())
    return sections
