"""GitHub comment reporter for posting coverage to pull requests.

Keeps exactly one coverage comment per pull request. Every published body
ends with a fixed HTML comment marker; on the next run the marker is used to
find the earlier comment and edit it in place instead of adding another.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from scoverage_comment.reporters.markdown import render_comment_markdown
from scoverage_comment.utils.git import GitHubAPI

if TYPE_CHECKING:
    from collections.abc import Iterator

    from scoverage_comment.models.coverage import Report
    from scoverage_comment.utils.git import GitHubPRInfo

logger = logging.getLogger(__name__)

COMMENT_MARKER = '<!-- scoverage-comment "coverage" -->'
"""Invisible tag identifying comments owned by this tool."""


class CommentStore(Protocol):
    """The subset of a comment API the upsert needs."""

    def iter_comment_pages(self, pr_info: GitHubPRInfo) -> Iterator[list[dict[str, Any]]]: ...

    def create_comment(self, pr_info: GitHubPRInfo, body: str) -> dict[str, Any]: ...

    def update_comment(
        self, pr_info: GitHubPRInfo, comment_id: int, body: str
    ) -> dict[str, Any]: ...


def tag_body(body: str, marker: str = COMMENT_MARKER) -> str:
    """Append the marker to a comment body."""
    return f"{body}\n\n{marker}"


def find_tagged_comment(
    store: CommentStore, pr_info: GitHubPRInfo, marker: str = COMMENT_MARKER
) -> dict[str, Any] | None:
    """Return the first comment containing the marker, or None.

    Stops requesting pages as soon as a match is found. If several tagged
    comments exist, only the earliest is returned.
    """
    for page in store.iter_comment_pages(pr_info):
        for comment in page:
            if marker in (comment.get("body") or ""):
                return comment
    return None


def upsert_comment(
    store: CommentStore, pr_info: GitHubPRInfo, body: str, marker: str = COMMENT_MARKER
) -> dict[str, Any]:
    """Create or update the tagged coverage comment on a pull request.

    Args:
        store: Comment API (``GitHubAPI`` in production).
        pr_info: Pull request to comment on.
        body: Markdown body, without the marker.
        marker: Tag used to find an earlier comment.

    Returns:
        The API response for the created or updated comment.

    Raises:
        GitHubAPIError: If listing, creating, or updating fails.
    """
    tagged = tag_body(body, marker)
    existing = find_tagged_comment(store, pr_info, marker)

    if existing:
        logger.info("Updating existing comment %d", existing["id"])
        return store.update_comment(pr_info, existing["id"], tagged)

    logger.info("Creating new comment")
    return store.create_comment(pr_info, tagged)


class GitHubCommentReporter:
    """Reporter that posts a coverage report as a GitHub PR comment."""

    def __init__(self, github_token: str | None = None, *, api: GitHubAPI | None = None) -> None:
        """Initialize the GitHub comment reporter.

        Args:
            github_token: GitHub token. If not provided, will try to read
                from GITHUB_TOKEN environment variable.
            api: An existing client to reuse instead of creating one.

        Raises:
            GitHubAPIError: If no token is available.
        """
        self._api = api or GitHubAPI(token=github_token)

    def post_coverage_report(self, pr_info: GitHubPRInfo, report: Report) -> dict[str, str]:
        """Render a report and upsert it as the PR's coverage comment.

        Returns:
            Dict with status and comment URL.

        Raises:
            GitHubAPIError: If posting the comment fails.
        """
        logger.info(
            "Posting coverage report to PR #%d in %s/%s",
            pr_info.pr_number,
            pr_info.owner,
            pr_info.repo,
        )

        body = render_comment_markdown(report)
        result = upsert_comment(self._api, pr_info, body)

        logger.info("Successfully posted comment: %s", result.get("html_url"))

        return {
            "status": "success",
            "comment_url": result.get("html_url", ""),
        }
