"""Reporters that turn coverage reports into Markdown, comments and terminal output."""

from scoverage_comment.reporters.github_comment import (
    COMMENT_MARKER,
    GitHubCommentReporter,
    upsert_comment,
)
from scoverage_comment.reporters.markdown import render_comment_markdown

__all__ = [
    "COMMENT_MARKER",
    "GitHubCommentReporter",
    "render_comment_markdown",
    "upsert_comment",
]
