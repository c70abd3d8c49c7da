"""Tests for the rich terminal reporter."""

from __future__ import annotations

import io
import math

import pytest
from rich.console import Console

from scoverage_comment.config import RunConfig
from scoverage_comment.models.coverage import Bucket, Report, UnitSummary
from scoverage_comment.reporters.terminal import CLIReporter, _rate_color


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def cli_reporter(buffer: io.StringIO) -> CLIReporter:
    return CLIReporter(Console(file=buffer, width=120, color_system=None))


def test_rate_color() -> None:
    assert _rate_color(0.9) == "green"
    assert _rate_color(0.6) == "yellow"
    assert _rate_color(0.1) == "red"
    assert _rate_color(math.nan) == "red"


def test_messages(cli_reporter: CLIReporter, buffer: io.StringIO) -> None:
    cli_reporter.print_success("posted")
    cli_reporter.print_error("failed")
    cli_reporter.print_warning("careful")

    output = buffer.getvalue()
    assert "✓ posted" in output
    assert "✗ failed" in output
    assert "⚠ careful" in output


def test_run_context(cli_reporter: CLIReporter, buffer: io.StringIO) -> None:
    cli_reporter.print_run_context(
        RunConfig(repository="octocat/hello-world", pr_number=42, base_ref="main", head_ref="x")
    )

    output = buffer.getvalue()
    assert "Repository octocat/hello-world" in output
    assert "Pull request #42" in output
    assert "Base ref main" in output
    assert "Head ref x" in output


def test_run_context_without_pr(cli_reporter: CLIReporter, buffer: io.StringIO) -> None:
    cli_reporter.print_run_context(RunConfig())

    assert "Pull request -" in buffer.getvalue()


def test_changed_files_are_truncated(cli_reporter: CLIReporter, buffer: io.StringIO) -> None:
    cli_reporter.print_changed_files([f"src/File{i}.scala" for i in range(60)])

    output = buffer.getvalue()
    assert "Changed files (60):" in output
    assert "- src/File49.scala" in output
    assert "src/File50.scala" not in output
    assert "and 10 more" in output


def test_changed_file_paths_are_not_markup(
    cli_reporter: CLIReporter, buffer: io.StringIO
) -> None:
    cli_reporter.print_changed_files(["docs/[draft].md"])

    assert "- docs/[draft].md" in buffer.getvalue()


def test_coverage_summary(cli_reporter: CLIReporter, buffer: io.StringIO) -> None:
    report = Report(
        all=Bucket(summary=UnitSummary(statement_rate=80.0, statements_total=100)),
        changed=Bucket(summary=UnitSummary(statement_rate=math.nan, statements_total=0)),
    )

    cli_reporter.print_coverage_summary(report)

    output = buffer.getvalue()
    assert "All files" in output
    assert "80.0%" in output
    assert "Changed files" in output
    assert "n/a" in output


def test_coverage_summary_malformed_counts(
    cli_reporter: CLIReporter, buffer: io.StringIO
) -> None:
    report = Report(
        all=Bucket(summary=UnitSummary(statement_rate=80.0, statements_total=100)),
        changed=Bucket(summary=UnitSummary(statement_rate=math.nan, statements_total=math.nan)),
    )

    cli_reporter.print_coverage_summary(report)

    output = buffer.getvalue()
    assert "nan" not in output
    assert output.count("n/a") == 2
