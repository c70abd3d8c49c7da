"""GitHub API utilities for scoverage-comment.

Covers the three things the tool needs from GitHub: the list of files
changed between two revisions, and listing, creating and updating pull
request comments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import requests

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
_GITHUB_AUTH_ENV_KEY = "GITHUB_" + "TOKEN"
_PER_PAGE = 100
_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class GitHubPRInfo:
    """Information about a GitHub pull request."""

    owner: str
    """Repository owner (username or organization)."""

    repo: str
    """Repository name."""

    pr_number: int
    """Pull request number."""


class GitHubAPIError(Exception):
    """Exception raised when GitHub API operations fail."""


class GitHubAPI:
    """Client for interacting with the GitHub API.

    Handles authentication, pagination, and PR comment management.
    """

    def __init__(self, token: str | None = None, *, base_url: str = GITHUB_API_BASE) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub token. If not provided, will try to read from the
                GITHUB_TOKEN environment variable.
            base_url: API root, for GitHub Enterprise Server installations.

        Raises:
            GitHubAPIError: If no token is available.
        """
        self._token = token or os.environ.get(_GITHUB_AUTH_ENV_KEY)
        if not self._token:
            raise GitHubAPIError(
                f"GitHub token required. Set {_GITHUB_AUTH_ENV_KEY} environment variable "
                "or pass token to constructor."
            )

        self._base_url = base_url.rstrip("/")
        self._session_headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def get_changed_files(self, owner: str, repo: str, base: str, head: str) -> list[str]:
        """List the paths changed between two revisions.

        Args:
            owner: Repository owner.
            repo: Repository name.
            base: Base ref or SHA.
            head: Head ref or SHA.

        Returns:
            Changed file paths in the order GitHub reports them.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = f"{self._base_url}/repos/{owner}/{repo}/compare/{base}...{head}"

        changed: list[str] = []
        for page in self._paginate(url, {"per_page": _PER_PAGE}):
            changed.extend(item["filename"] for item in page.get("files") or [])
        return changed

    def iter_comment_pages(self, pr_info: GitHubPRInfo) -> Iterator[list[dict[str, Any]]]:
        """Yield the comments on a pull request one page at a time.

        Pages are fetched lazily, so a caller that stops iterating early
        does not request the remaining pages.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = (
            f"{self._base_url}/repos/{pr_info.owner}/{pr_info.repo}/"
            f"issues/{pr_info.pr_number}/comments"
        )
        yield from self._paginate(url, {"per_page": _PER_PAGE})

    def create_comment(self, pr_info: GitHubPRInfo, body: str) -> dict[str, Any]:
        """Create a new comment on a pull request.

        Args:
            pr_info: Pull request information.
            body: Comment body (markdown formatted).

        Returns:
            GitHub API response as a dictionary.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = (
            f"{self._base_url}/repos/{pr_info.owner}/{pr_info.repo}/"
            f"issues/{pr_info.pr_number}/comments"
        )

        result: dict[str, Any] = self._post(url, {"body": body})
        return result

    def update_comment(self, pr_info: GitHubPRInfo, comment_id: int, body: str) -> dict[str, Any]:
        """Update an existing comment on a pull request.

        Args:
            pr_info: Pull request information.
            comment_id: ID of the comment to update.
            body: New comment body (markdown formatted).

        Returns:
            GitHub API response as a dictionary.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = f"{self._base_url}/repos/{pr_info.owner}/{pr_info.repo}/issues/comments/{comment_id}"

        result: dict[str, Any] = self._patch(url, {"body": body})
        return result

    def _paginate(self, url: str, params: dict[str, Any] | None = None) -> Iterator[Any]:
        """Follow ``Link: rel="next"`` headers, yielding each page's JSON."""
        next_url: str | None = url
        next_params = params
        while next_url:
            response = self._get(next_url, next_params)
            yield response.json()
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string.
            next_params = None

    def _get(self, url: str, params: dict[str, Any] | None = None) -> requests.Response:
        """Make a GET request to the GitHub API.

        Args:
            url: Full API URL.
            params: Optional query parameters.

        Returns:
            The response, after checking its status.

        Raises:
            GitHubAPIError: If the request fails.
        """
        try:
            response = requests.get(
                url, params=params, headers=self._session_headers, timeout=_TIMEOUT_SECONDS
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise GitHubAPIError(f"GET request failed: {exc}") from exc
        return response

    def _post(self, url: str, data: dict[str, Any]) -> Any:
        """Make a POST request to the GitHub API.

        Raises:
            GitHubAPIError: If the request fails.
        """
        try:
            response = requests.post(
                url, json=data, headers=self._session_headers, timeout=_TIMEOUT_SECONDS
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise GitHubAPIError(f"POST request failed: {exc}") from exc

    def _patch(self, url: str, data: dict[str, Any]) -> Any:
        """Make a PATCH request to the GitHub API.

        Raises:
            GitHubAPIError: If the request fails.
        """
        try:
            response = requests.patch(
                url, json=data, headers=self._session_headers, timeout=_TIMEOUT_SECONDS
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise GitHubAPIError(f"PATCH request failed: {exc}") from exc
