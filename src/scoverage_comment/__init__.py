"""scoverage-comment: Scoverage statement coverage as a sticky pull request comment."""

__version__ = "0.1.0"
