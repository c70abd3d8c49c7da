"""Markdown rendering of coverage buckets for pull request comments."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scoverage_comment.models.coverage import Bucket, Report

DEFAULT_THRESHOLDS = (0.8, 0.6)
"""Rates at or above the first value are green, at or above the second yellow."""

MAX_CLASS_NAME_LENGTH = 80
_ELLIPSIS = "..."

_GREEN = ":green_circle:"
_YELLOW = ":yellow_circle:"
_RED = ":red_circle:"


def coverage_rate_icon(rate: float, thresholds: tuple[float, float] = DEFAULT_THRESHOLDS) -> str:
    """Map a coverage fraction to a traffic-light emoji shortcode.

    NaN fails both comparisons and is therefore red.
    """
    good, acceptable = thresholds
    if rate >= good:
        return _GREEN
    if rate >= acceptable:
        return _YELLOW
    return _RED


def abbreviate_class_name(name: str, limit: int = MAX_CLASS_NAME_LENGTH) -> str:
    """Shorten a qualified name to fit a table cell.

    Segments are listed innermost first (``a.b.C`` becomes ``C.b.a``) and
    outer segments are dropped once the limit would be exceeded, leaving a
    trailing ``...``.
    """
    segments = name.split(".")[::-1]
    result = segments[0]
    for segment in segments[1:]:
        candidate = f"{result}.{segment}"
        if len(candidate) > limit - len(_ELLIPSIS):
            return result + _ELLIPSIS
        result = candidate
    return result


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_count(value: int | float) -> str:
    """Format a statement count, or ``"n/a"`` for a malformed one."""
    if isinstance(value, float) and not math.isfinite(value):
        return "n/a"
    return str(int(value))


def _format_percent(percent: float) -> str:
    """Format to one decimal place, rounding ties up like ``"6.25"`` -> ``"6.3%"``."""
    if not math.isfinite(percent):
        return "n/a"
    return f"{Decimal(percent).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}%"


def _format_rate(percent: float, invoked: int | float, total: int | float) -> str:
    """Format a percentage with counts as ``"50.0% (5/10)"``."""
    return f"{_format_percent(percent)} ({format_count(invoked)}/{format_count(total)})"


def render_bucket(title: str, bucket: Bucket) -> str:
    """Render one bucket as a collapsible section with a per-class table.

    The header's invoked count is derived from the rounded rate so that it
    always agrees with the header percentage.
    """
    summary = bucket.summary
    summary_rate = summary.statement_rate / 100
    summary_invoked = _round_half_up(summary_rate * summary.statements_total)
    summary_text = _format_rate(summary.statement_rate, summary_invoked, summary.statements_total)

    lines = [
        "<details>",
        f"<summary>{title} {coverage_rate_icon(summary_rate)} {summary_text}</summary>",
        "",
        "| Class | Statement coverage |",
        "|---|---|",
    ]
    for record in bucket.records:
        rate = record.statement_rate
        text = _format_rate(rate * 100, record.statements_invoked, record.statements_total)
        lines.append(
            f"| `{abbreviate_class_name(record.name)}` | {coverage_rate_icon(rate)} {text} |"
        )
    lines.append("")
    lines.append("</details>")

    return "\n".join(lines) + "\n"


def render_comment_markdown(report: Report) -> str:
    """Render the comment body for a report.

    Buckets whose summary rate is not finite (for example a pull request that
    touches no covered file) are left out. Returns an empty string if both are.
    """
    sections: list[str] = []
    if report.all.summary.is_finite:
        sections.append(render_bucket("All files", report.all))
    if report.changed.summary.is_finite:
        sections.append(render_bucket("Changed files", report.changed))
    return "".join(sections)
