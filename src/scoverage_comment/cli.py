"""scoverage-comment CLI — top-level command group."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypedDict, Unpack

import click

from scoverage_comment import __version__
from scoverage_comment.adapters.scoverage import MalformedReportError, parse_report, read_report
from scoverage_comment.config import load_config, validate_config
from scoverage_comment.reporters.github_comment import GitHubCommentReporter
from scoverage_comment.reporters.markdown import render_comment_markdown
from scoverage_comment.reporters.terminal import reporter
from scoverage_comment.utils.git import GitHubAPI, GitHubAPIError, GitHubPRInfo

if TYPE_CHECKING:
    from scoverage_comment.config import RunConfig

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _CommentKwargs(TypedDict):
    """Keyword arguments for the comment CLI command."""

    github_token: str | None
    repository: str | None
    base_ref: str | None
    head_ref: str | None
    pr_number: int | None
    report_path: str | None
    api_url: str | None
    log_level: str | None
    config_dir: str


def _configure_logging(level: str) -> None:
    """Send log records to stderr at the configured level."""
    logging.basicConfig(level=level, format=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
    logging.getLogger().setLevel(level)
    # Suppress noisy http logging
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _load_run_config(config_dir: str, overrides: dict[str, Any]) -> RunConfig:
    config = load_config(config_dir, overrides)
    errors = validate_config(config)
    if not errors:
        return config

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    for idx, error in enumerate(errors, start=1):
        reporter.console.print(f"  {idx}. [red]{error}[/red]")
    raise click.Abort


def _fetch_changed_files(api: GitHubAPI | None, config: RunConfig) -> list[str]:
    if api is None or not config.has_refs or not config.owner or not config.repo:
        reporter.print_warning("No base/head revisions given, the changed files section is empty")
        return []

    logger.info("Comparing %s...%s in %s", config.base_ref, config.head_ref, config.repository)
    changed_files = api.get_changed_files(
        config.owner, config.repo, config.base_ref, config.head_ref
    )
    reporter.print_changed_files(changed_files)
    return changed_files


@click.group()
@click.version_option(version=__version__, prog_name="scoverage-comment")
def cli() -> None:
    """scoverage-comment — Scoverage statement coverage as a pull request comment."""


@cli.command()
@click.option("--github-token", default=None, help="GitHub token (default: $GITHUB_TOKEN).")
@click.option(
    "--repository",
    default=None,
    help="Repository as owner/repo (default: $GITHUB_REPOSITORY).",
)
@click.option("--base-ref", default=None, help="Base revision (default: $GITHUB_BASE_REF).")
@click.option("--head-ref", default=None, help="Head revision (default: $GITHUB_HEAD_REF).")
@click.option(
    "--pull-request-number",
    "pr_number",
    type=int,
    default=None,
    help="Pull request to comment on. Without one the Markdown is printed to stdout.",
)
@click.option(
    "--report-path",
    default=None,
    help="Path to scoverage.xml (default: $SCOVERAGE_REPORT_PATH or the sbt default).",
)
@click.option("--api-url", default=None, help="GitHub API root (default: $GITHUB_API_URL).")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVEL_CHOICES, case_sensitive=False),
    default=None,
    help="Logging level for stderr output.",
)
@click.option(
    "--config-dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory containing .scoverage-comment.yml.",
)
def comment(**kwargs: Unpack[_CommentKwargs]) -> None:
    """Parse the coverage report and upsert the pull request comment.

    Examples:
        scoverage-comment comment --pull-request-number 42
        scoverage-comment comment --base-ref main --head-ref my-branch > coverage.md
    """
    config_dir = kwargs["config_dir"]
    overrides: dict[str, Any] = {key: value for key, value in kwargs.items() if key != "config_dir"}
    config = _load_run_config(config_dir, overrides)
    _configure_logging(config.log_level)

    reporter.print_header("scoverage-comment")
    reporter.print_run_context(config)

    try:
        api: GitHubAPI | None = None
        if config.has_refs or config.pr_number is not None:
            api = GitHubAPI(token=config.github_token, base_url=config.api_url)

        changed_files = _fetch_changed_files(api, config)
        report = parse_report(read_report(config.report_path), changed_files)
    except (GitHubAPIError, MalformedReportError, OSError) as e:
        reporter.print_error(f"Failed to build coverage report: {e}")
        raise click.Abort from e

    reporter.print_coverage_summary(report)

    if config.pr_number is None or api is None:
        click.echo(render_comment_markdown(report), nl=False)
        return

    pr_info = GitHubPRInfo(
        owner=config.owner or "", repo=config.repo or "", pr_number=config.pr_number
    )
    try:
        result = GitHubCommentReporter(api=api).post_coverage_report(pr_info, report)
    except GitHubAPIError as e:
        reporter.print_error(f"Failed to post coverage comment: {e}")
        raise click.Abort from e

    reporter.print_success(f"Coverage comment posted: {result['comment_url']}")


@cli.command()
@click.argument("report_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--changed-file",
    "changed_files",
    multiple=True,
    help="A changed file path. Repeat for each file.",
)
@click.option(
    "--changed-files-from",
    type=click.File("r"),
    default=None,
    help="Read changed file paths, one per line, from a file ('-' for stdin).",
)
def render(report_path: str, changed_files: tuple[str, ...], changed_files_from: Any) -> None:
    """Render the comment Markdown for a local report without calling GitHub.

    Example:
        git diff --name-only main | scoverage-comment render scoverage.xml --changed-files-from -
    """
    paths = list(changed_files)
    if changed_files_from is not None:
        paths.extend(line.strip() for line in changed_files_from if line.strip())

    try:
        report = parse_report(read_report(report_path), paths)
    except (MalformedReportError, OSError) as e:
        reporter.print_error(f"Failed to build coverage report: {e}")
        raise click.Abort from e

    click.echo(render_comment_markdown(report), nl=False)
