"""Shared fixtures for integration tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from scoverage_comment.adapters.scoverage import DEFAULT_REPORT_PATH

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def write_file(root: Path, rel: str, content: str) -> None:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


def write_json(root: Path, rel: str, data: dict[str, Any]) -> None:
    """Write a JSON file under *root*."""
    write_file(root, rel, json.dumps(data, indent=2))


# ── Project scaffolding fixtures ─────────────────────────────────

SCOVERAGE_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<scoverage statement-count="120" statements-invoked="90" statement-rate="75.00" \
branch-rate="50.00" version="1.0" timestamp="1700000000000">
  <packages>
    <package name="com.example" statement-count="120" statements-invoked="90" \
statement-rate="75.00">
      <classes>
        <class name="com.example.Calculator" filename="com/example/Calculator.scala" \
statement-count="20" statements-invoked="19" statement-rate="95.00" branch-rate="50.00">
          <methods/>
        </class>
        <class name="com.example.Parser" filename="com/example/Parser.scala" \
statement-count="100" statements-invoked="71" statement-rate="71.00" branch-rate="50.00">
          <methods/>
        </class>
      </classes>
    </package>
  </packages>
</scoverage>
"""


@pytest.fixture()
def sbt_project(tmp_path: Path) -> Path:
    """Create an sbt project directory with a scoverage report at the default path."""
    write_file(tmp_path, "build.sbt", 'scalaVersion := "2.13.12"\n')
    write_file(
        tmp_path,
        "project/plugins.sbt",
        'addSbtPlugin("org.scoverage" % "sbt-scoverage" % "2.0.9")\n',
    )
    write_file(tmp_path, DEFAULT_REPORT_PATH, SCOVERAGE_XML)
    return tmp_path


@pytest.fixture()
def github_actions_env(
    sbt_project: Path, monkeypatch: pytest.MonkeyPatch
) -> dict[str, str]:
    """Emulate the environment of a ``pull_request`` workflow run for PR #42."""
    write_json(sbt_project, "event.json", {"action": "synchronize", "pull_request": {"number": 42}})
    env = {
        "GITHUB_ACTIONS": "true",
        "GITHUB_EVENT_NAME": "pull_request",
        "GITHUB_EVENT_PATH": str(sbt_project / "event.json"),
        "GITHUB_REPOSITORY": "octocat/hello-world",
        "GITHUB_BASE_REF": "main",
        "GITHUB_HEAD_REF": "feature",
        "GITHUB_TOKEN": "test-value",
    }
    for key in (
        "GITHUB_PULL_REQUEST_NUMBER",
        "GITHUB_API_URL",
        "SCOVERAGE_REPORT_PATH",
        "SCOVERAGE_COMMENT_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.chdir(sbt_project)
    return env
