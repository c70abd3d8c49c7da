"""Run configuration from ``.scoverage-comment.yml``, the environment, and CLI options.

Configuration is resolved once at startup into an immutable ``RunConfig``.
Precedence, highest first: CLI options, the YAML file, environment
variables, built-in defaults.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from scoverage_comment.adapters.scoverage import DEFAULT_REPORT_PATH
from scoverage_comment.utils.ci_context import detect_ci_context, parse_int, split_repository
from scoverage_comment.utils.git import GITHUB_API_BASE

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".scoverage-comment.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        else:
            result[key] = value
    return result


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    return section if isinstance(section, dict) else {}


def _first(*values: Any) -> Any:
    """Return the first value that is not None or an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


@dataclass(frozen=True)
class RunConfig:
    """Everything a single run needs, resolved up front."""

    github_token: str = ""
    """Token for the GitHub REST API."""

    repository: str = ""
    """Repository as ``owner/repo``."""

    base_ref: str = ""
    """Base revision of the comparison."""

    head_ref: str = ""
    """Head revision of the comparison."""

    pr_number: int | None = None
    """Pull request to comment on. None prints the Markdown instead."""

    report_path: str = DEFAULT_REPORT_PATH
    """Path to ``scoverage.xml``."""

    api_url: str = GITHUB_API_BASE
    """GitHub REST API root."""

    log_level: str = "WARNING"
    """Root logger level."""

    @property
    def owner(self) -> str | None:
        return split_repository(self.repository)[0]

    @property
    def repo(self) -> str | None:
        return split_repository(self.repository)[1]

    @property
    def has_refs(self) -> bool:
        """Return True when both revisions are known."""
        return bool(self.base_ref and self.head_ref)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if isinstance(parsed, dict):
        return _resolve_dict(parsed)
    return {}


def _coerce_pr_number(value: Any) -> int | None:
    if value is None or isinstance(value, int):
        return value
    number = parse_int(str(value))
    if number is None:
        logger.warning("Ignoring non-numeric pull request number %r", value)
    return number


def load_config(root: str | Path = ".", overrides: Mapping[str, Any] | None = None) -> RunConfig:
    """Resolve the run configuration.

    Args:
        root: Directory containing the optional ``.scoverage-comment.yml``.
        overrides: Values from the command line, keyed by ``RunConfig`` field
            name. None values are ignored.

    Returns:
        The resolved configuration.
    """
    cli = {key: value for key, value in (overrides or {}).items() if value is not None}
    raw = _load_yaml(Path(root) / CONFIG_FILENAME)
    github_raw = _section(raw, "github")
    refs_raw = _section(raw, "refs")
    report_raw = _section(raw, "report")
    logging_raw = _section(raw, "logging")
    ci = detect_ci_context()

    pr_number = _first(
        cli.get("pr_number"),
        github_raw.get("pull_request_number"),
        os.environ.get("GITHUB_PULL_REQUEST_NUMBER"),
        ci.pr_number,
    )

    return RunConfig(
        github_token=str(
            _first(cli.get("github_token"), github_raw.get("token"), os.environ.get("GITHUB_TOKEN"))
            or ""
        ),
        repository=str(
            _first(
                cli.get("repository"),
                github_raw.get("repository"),
                os.environ.get("GITHUB_REPOSITORY"),
            )
            or ""
        ),
        base_ref=str(
            _first(cli.get("base_ref"), refs_raw.get("base"), os.environ.get("GITHUB_BASE_REF"))
            or ""
        ),
        head_ref=str(
            _first(cli.get("head_ref"), refs_raw.get("head"), os.environ.get("GITHUB_HEAD_REF"))
            or ""
        ),
        pr_number=_coerce_pr_number(pr_number),
        report_path=str(
            _first(
                cli.get("report_path"),
                report_raw.get("path"),
                os.environ.get("SCOVERAGE_REPORT_PATH"),
            )
            or DEFAULT_REPORT_PATH
        ),
        api_url=str(
            _first(cli.get("api_url"), github_raw.get("api_url"), os.environ.get("GITHUB_API_URL"))
            or GITHUB_API_BASE
        ),
        log_level=str(
            _first(
                cli.get("log_level"),
                logging_raw.get("level"),
                os.environ.get("SCOVERAGE_COMMENT_LOG_LEVEL"),
            )
            or "WARNING"
        ).upper(),
    )


def validate_config(config: RunConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if config.repository and config.owner is None:
        errors.append(f"github.repository must look like 'owner/repo', got {config.repository!r}")

    if config.pr_number is not None and config.pr_number <= 0:
        errors.append(f"github.pull_request_number must be positive, got {config.pr_number}")

    if bool(config.base_ref) != bool(config.head_ref):
        errors.append("refs.base and refs.head must be set together")

    needs_github = config.pr_number is not None or config.has_refs
    if needs_github and not config.repository:
        errors.append("github.repository is required to compare revisions or post comments")
    if needs_github and not config.github_token:
        errors.append("github.token is required to compare revisions or post comments")

    if not config.report_path:
        errors.append("report.path is required")

    if config.log_level not in _LOG_LEVELS:
        errors.append(
            f"logging.level must be one of {', '.join(sorted(_LOG_LEVELS))}, "
            f"got {config.log_level!r}"
        )

    return errors
