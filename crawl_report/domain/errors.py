from __future__ import annotations


class ReportError(RuntimeError):
    """Base class for failures while building a crawl report."""


class InvalidInputError(ReportError, ValueError):
    """Raised when query rows or report inputs are malformed."""


class DivisionByZeroError(ReportError, ZeroDivisionError):
    """Raised when percentages are requested for a zero total count."""


class FormatError(InvalidInputError):
    """Raised when the summary lacks a field the report title needs."""


class UpstreamFailure(ReportError):
    """Raised when the database query collaborator fails."""
