"""CI and PR context detection utilities."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Expected number of parts when splitting "owner/repo"
_OWNER_REPO_PARTS = 2


@dataclass(frozen=True)
class CIContext:
    """Detected CI/PR execution context."""

    is_ci: bool
    """Running in GitHub Actions."""

    is_pr: bool
    """Running for a pull_request event."""

    pr_number: int | None
    """PR number if in PR context."""

    base_ref: str | None
    """Base/target branch for PR."""

    head_ref: str | None
    """Source branch for PR."""

    commit_sha: str | None
    """Current commit SHA."""

    repo_owner: str | None
    """Repository owner (org or user)."""

    repo_name: str | None
    """Repository name."""


def split_repository(value: str | None) -> tuple[str | None, str | None]:
    """Split ``"owner/repo"`` into its parts, or return (None, None)."""
    parts = value.split("/") if value else []
    if len(parts) != _OWNER_REPO_PARTS or not all(parts):
        return None, None
    return parts[0], parts[1]


def detect_ci_context() -> CIContext:
    """Detect GitHub Actions context from environment variables.

    Returns:
        CIContext with detected values. Outside GitHub Actions every field
        except ``is_ci``/``is_pr`` is None.
    """
    if os.getenv("GITHUB_ACTIONS") != "true":
        return CIContext(
            is_ci=False,
            is_pr=False,
            pr_number=None,
            base_ref=None,
            head_ref=None,
            commit_sha=None,
            repo_owner=None,
            repo_name=None,
        )

    event_name = os.getenv("GITHUB_EVENT_NAME", "")
    is_pr = event_name in {"pull_request", "pull_request_target"}
    repo_owner, repo_name = split_repository(os.getenv("GITHUB_REPOSITORY"))

    return CIContext(
        is_ci=True,
        is_pr=is_pr,
        pr_number=read_event_pr_number(os.getenv("GITHUB_EVENT_PATH")),
        base_ref=os.getenv("GITHUB_BASE_REF") or None,
        head_ref=os.getenv("GITHUB_HEAD_REF") or None,
        commit_sha=os.getenv("GITHUB_SHA"),
        repo_owner=repo_owner,
        repo_name=repo_name,
    )


def read_event_pr_number(event_path: str | None) -> int | None:
    """Read ``pull_request.number`` from a GitHub Actions event payload.

    Missing or unreadable payloads are not an error for non-PR events.
    """
    if not event_path:
        return None
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Could not read event payload %s: %s", event_path, exc)
        return None

    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    return number if isinstance(number, int) else None


def parse_int(value: str | None) -> int | None:
    """Parse string to int, return None if invalid."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None
