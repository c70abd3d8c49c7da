"""Coverage report models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class UnitSummary:
    """Statement coverage summary for a bucket."""

    statement_rate: float
    """Statement coverage percentage (0.0 to 100.0). May be NaN."""

    statements_total: int | float
    """Number of statements covered by the summary."""

    @property
    def is_finite(self) -> bool:
        """Return True if the rate can be rendered."""
        return math.isfinite(self.statement_rate)


@dataclass(frozen=True)
class CoverageRecord:
    """Coverage counts for a single compilation unit (a Scala class or object)."""

    name: str
    """Fully qualified, dot-separated unit name."""

    filename: str
    """Source file path as written by the coverage tool."""

    statements_total: int | float
    """Number of statements in the unit (NaN if the report value was malformed)."""

    statements_invoked: int | float
    """Number of statements executed at least once (NaN if malformed)."""

    @property
    def statement_rate(self) -> float:
        """Return statement coverage as a fraction (0.0 to 1.0), NaN for empty units."""
        if not self.statements_total:
            return math.nan
        return self.statements_invoked / self.statements_total


@dataclass(frozen=True)
class Bucket:
    """A named view over a subset of coverage records."""

    summary: UnitSummary
    records: tuple[CoverageRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Report:
    """Both buckets produced for a single run."""

    all: Bucket
    """Every unit in the report, with the document-level summary."""

    changed: Bucket
    """Units whose file was touched by the pull request."""
