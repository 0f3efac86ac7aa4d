from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

from crawl_report.domain.errors import InvalidInputError

UNSUCCESSFUL = "unsuccessful"
OUTSTANDING = "outstanding"
NO_SECTION = "(none)"


def _coerce_count(value: Any, column: str) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"Column {column!r} must be an integer, got {value!r}")
    if isinstance(value, int):
        count = value
    elif isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        # DB drivers hand back SUM()/COUNT() as Decimal on some backends.
        count = int(value)
    else:
        raise InvalidInputError(f"Column {column!r} must be an integer, got {value!r}")
    if count < 0:
        raise InvalidInputError(f"Column {column!r} must be non-negative, got {count}")
    return count


@dataclass(slots=True, frozen=True)
class CountRow:
    key: str
    count: int
    section: str | None = None

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Any],
        *,
        key_column: str = "status",
        count_column: str = "Total Count",
        section_column: str | None = None,
    ) -> CountRow:
        """Build a row from one query result mapping."""
        if key_column not in row:
            raise InvalidInputError(f"Row is missing key column {key_column!r}: {dict(row)!r}")
        if count_column not in row:
            raise InvalidInputError(f"Row is missing count column {count_column!r}: {dict(row)!r}")

        section = None
        if section_column is not None:
            if section_column not in row:
                raise InvalidInputError(
                    f"Row is missing section column {section_column!r}: {dict(row)!r}"
                )
            value = row[section_column]
            section = NO_SECTION if value is None else str(value)

        return cls(
            key=str(row[key_column]),
            count=_coerce_count(row[count_column], count_column),
            section=section,
        )


@dataclass(slots=True, frozen=True)
class ClassificationRule:
    unsuccessful: frozenset[str] = frozenset()
    outstanding: frozenset[str] = frozenset()

    def bucket(self, key: str) -> str | None:
        if key in self.unsuccessful:
            return UNSUCCESSFUL
        if key in self.outstanding:
            return OUTSTANDING
        return None


DEFAULT_STATUS_RULE = ClassificationRule(
    unsuccessful=frozenset({"cancelled", "failure"}),
    outstanding=frozenset({"scheduled", "crawling"}),
)


@dataclass(slots=True, frozen=True)
class ReportWindow:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidInputError(
                f"Report window must end after it starts ({self.start.isoformat()} >= {self.end.isoformat()})"
            )


@dataclass(slots=True, frozen=True)
class Summary:
    start_time: datetime | None
    end_time: datetime | None
    total: int
    unsuccessful: int = 0
    outstanding: int = 0
    finished_percentage: Decimal | None = None
    unsuccessful_percentage: Decimal | None = None


@dataclass(slots=True)
class ReportSection:
    title: str | None
    rows: list[CountRow] = field(default_factory=list)
