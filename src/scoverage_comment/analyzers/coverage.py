"""Build the "All files" and "Changed files" buckets from parsed coverage.

The changed bucket's rate is always recomputed from the summed statement
counts of the matching records. It is never copied from the document-level
rate and never averaged per record.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from scoverage_comment.models.coverage import Bucket, CoverageRecord, Report, UnitSummary

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


def is_changed(record: CoverageRecord, changed_files: Iterable[str]) -> bool:
    """Return True if any changed path contains the record's filename.

    Scoverage writes filenames relative to the source root while GitHub
    reports paths relative to the repository root, so containment is used
    instead of equality. Two units whose filenames are substrings of the same
    path will both match.
    """
    return any(record.filename in path for path in changed_files)


def filter_changed(
    records: Sequence[CoverageRecord], changed_files: Sequence[str]
) -> tuple[CoverageRecord, ...]:
    """Return the records touched by the changed files, in document order."""
    return tuple(record for record in records if is_changed(record, changed_files))


def summarize(records: Sequence[CoverageRecord]) -> UnitSummary:
    """Recompute a summary from per-unit statement counts.

    An empty sequence yields a NaN rate, which renderers treat as "nothing
    to show".
    """
    invoked = sum(record.statements_invoked for record in records)
    total = sum(record.statements_total for record in records)
    rate = invoked / total * 100 if total else math.nan
    return UnitSummary(statement_rate=rate, statements_total=total)


def build_report(
    summary: UnitSummary,
    records: Sequence[CoverageRecord],
    changed_files: Sequence[str],
) -> Report:
    """Assemble both buckets for a run.

    Args:
        summary: Document-level summary as declared by the report.
        records: Every unit in document order.
        changed_files: Paths changed between the compared revisions.

    Returns:
        Report with the pass-through "all" bucket and the filtered "changed" bucket.
    """
    changed_records = filter_changed(records, changed_files)
    changed_summary = summarize(changed_records)
    logger.debug(
        "%d of %d units belong to %d changed files",
        len(changed_records),
        len(records),
        len(changed_files),
    )

    return Report(
        all=Bucket(summary=summary, records=tuple(records)),
        changed=Bucket(summary=changed_summary, records=changed_records),
    )
