"""Data models for scoverage-comment."""

from scoverage_comment.models.coverage import Bucket, CoverageRecord, Report, UnitSummary

__all__ = ["Bucket", "CoverageRecord", "Report", "UnitSummary"]
