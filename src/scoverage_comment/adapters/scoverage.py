"""Scoverage XML report adapter.

Scoverage (the Scala statement coverage plugin for sbt) writes
``scoverage.xml`` with a flat, stable attribute layout. Only eight attribute
values are needed, so they are pulled out by pattern matching rather than by
building an element tree:

- the root ``<scoverage>`` element carries the document summary
  (``statement-count``, ``statements-invoked``, ``statement-rate``,
  ``branch-rate``);
- every ``<class>`` element carries ``name``, ``filename``,
  ``statement-count`` and ``statements-invoked``.
"""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import TYPE_CHECKING

from scoverage_comment.analyzers.coverage import build_report
from scoverage_comment.models.coverage import CoverageRecord, UnitSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoverage_comment.models.coverage import Report

logger = logging.getLogger(__name__)

DEFAULT_REPORT_PATH = "target/scala-2.13/scoverage-report/scoverage.xml"

# <class> elements carry the same four attributes; only the root element
# follows them with a version attribute.
_SUMMARY_RE = re.compile(
    r'statement-count="(\d+)" statements-invoked="([^"]+)" '
    r'statement-rate="([^"]+)" branch-rate="([^"]+)" version="'
)
_CLASS_RE = re.compile(
    r'name="([^"]+)" filename="([^"]+)" '
    r'statement-count="([^"]+)" statements-invoked="([^"]+)"'
)
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


class MalformedReportError(ValueError):
    """Raised when the document-level coverage summary cannot be extracted."""


def _parse_count(text: str) -> int | float:
    """Parse a leading integer, returning NaN instead of raising."""
    match = _LEADING_INT_RE.match(text)
    if not match:
        return math.nan
    return int(match.group(1))


def _parse_summary(document: str) -> UnitSummary:
    match = _SUMMARY_RE.search(document)
    if not match:
        raise MalformedReportError("unable to parse scoverage summary")

    statement_count, _invoked, statement_rate, _branch_rate = match.groups()
    try:
        rate = float(statement_rate)
    except ValueError as exc:
        raise MalformedReportError(
            f"unable to parse scoverage statement rate {statement_rate!r}"
        ) from exc

    return UnitSummary(statement_rate=rate, statements_total=int(statement_count))


def _parse_records(document: str) -> list[CoverageRecord]:
    return [
        CoverageRecord(
            name=name,
            filename=filename,
            statements_total=_parse_count(statement_count),
            statements_invoked=_parse_count(statements_invoked),
        )
        for name, filename, statement_count, statements_invoked in _CLASS_RE.findall(document)
    ]


def extract_coverage(document: str) -> tuple[UnitSummary, list[CoverageRecord]]:
    """Extract the document summary and per-class records.

    Args:
        document: Full text of a ``scoverage.xml`` report.

    Returns:
        Tuple of (document summary, records in document order).

    Raises:
        MalformedReportError: If the summary attributes are missing or unparseable.
    """
    summary = _parse_summary(document)
    records = _parse_records(document)
    logger.debug(
        "Parsed scoverage summary %.2f%% of %s statements, %d classes",
        summary.statement_rate,
        summary.statements_total,
        len(records),
    )
    return summary, records


def parse_report(document: str, changed_files: Sequence[str]) -> Report:
    """Parse a Scoverage report and split it into All / Changed buckets.

    Raises:
        MalformedReportError: If the summary attributes are missing or unparseable.
    """
    summary, records = extract_coverage(document)
    return build_report(summary, records, changed_files)


def read_report(report_path: str | Path) -> str:
    """Read a report document from disk. ``OSError`` propagates to the caller."""
    path = Path(report_path)
    logger.info("Reading scoverage report %s", path)
    return path.read_text(encoding="utf-8")
