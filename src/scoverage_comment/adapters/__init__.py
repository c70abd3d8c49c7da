"""Coverage report adapters."""

from scoverage_comment.adapters.scoverage import (
    DEFAULT_REPORT_PATH,
    MalformedReportError,
    extract_coverage,
    parse_report,
    read_report,
)

__all__ = [
    "DEFAULT_REPORT_PATH",
    "MalformedReportError",
    "extract_coverage",
    "parse_report",
    "read_report",
]
