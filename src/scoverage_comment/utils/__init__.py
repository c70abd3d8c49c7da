"""Utilities for talking to GitHub and reading the CI environment."""
