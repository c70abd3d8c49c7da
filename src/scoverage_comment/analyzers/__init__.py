"""Coverage analyzers."""

from scoverage_comment.analyzers.coverage import build_report, filter_changed, summarize

__all__ = ["build_report", "filter_changed", "summarize"]
