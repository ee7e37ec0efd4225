"""Shared test fixtures for buildherald."""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import requests

from buildherald.collector import MetadataCollector, RepositoryDescriptor
from buildherald.config import NotifierConfig
from buildherald.models.hosts import (
    AppVeyorHost,
    AzurePipelinesHost,
    GitHubActionsHost,
    GitLabHost,
    TeamCityHost,
)
from buildherald.models.status import ExecutionStatus

FIXED_START = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep BUILDHERALD_* variables and stray .env files out of every test."""
    for name in list(os.environ):
        if name.startswith("BUILDHERALD_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Build engine stand-ins
# ---------------------------------------------------------------------------


@dataclass
class FakeTarget:
    """Mutable target, updated by the test the way an engine would."""

    name: str
    status: ExecutionStatus = ExecutionStatus.NOT_RUN
    duration: timedelta = timedelta(0)
    summary_data: dict[str, str] = field(default_factory=dict)


class FakeGit:
    """In-memory GitInspector."""

    def __init__(
        self,
        *,
        url: str = "https://example.com/org/repo.git",
        branch: str | None = "main",
        commit_id: str = "c0ffee",
        tag: str | None = "v1.0.0",
        log_lines: list[str] | None = None,
        repository_error: Exception | None = None,
        log_error: Exception | None = None,
    ) -> None:
        self.url = url
        self.branch = branch
        self.commit_id = commit_id
        self.tag = tag
        self.log_lines = log_lines if log_lines is not None else [
            "c0ffee\tAda Lovelace\tada@example.com\tAdd notifier",
            "beef00\tGrace Hopper\tgrace@example.com\tFix parser",
        ]
        self.repository_error = repository_error
        self.log_error = log_error
        self.log_calls: list[tuple[str, str]] = []

    def repository(self) -> RepositoryDescriptor:
        if self.repository_error is not None:
            raise self.repository_error
        return RepositoryDescriptor(url=self.url, branch=self.branch, commit_id=self.commit_id)

    def previous_tag(self, commit_id: str) -> str | None:
        return self.tag

    def log(self, revision_range: str, pretty_format: str) -> list[str]:
        self.log_calls.append((revision_range, pretty_format))
        if self.log_error is not None:
            raise self.log_error
        return list(self.log_lines)


# ---------------------------------------------------------------------------
# HTTP stand-ins
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code


class RecordingSession:
    """Stands in for ``requests.Session``; records every POST."""

    def __init__(self, status_code: int = 200, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.posts: list[dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.posts.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_target() -> Callable[..., FakeTarget]:
    """Factory fixture: a mutable engine target."""
    return FakeTarget


@pytest.fixture
def make_git() -> Callable[..., FakeGit]:
    """Factory fixture: an in-memory GitInspector with overrides."""
    return FakeGit


@pytest.fixture
def make_session() -> Callable[..., RecordingSession]:
    """Factory fixture: a recording HTTP session with a fixed status code."""
    return RecordingSession


@pytest.fixture
def fixed_start() -> datetime:
    return FIXED_START


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def collector(fake_git: FakeGit) -> MetadataCollector:
    """A MetadataCollector over FakeGit with a fixed start time."""
    return MetadataCollector(fake_git, clock=lambda: FIXED_START)


@pytest.fixture
def session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture
def failing_session() -> RecordingSession:
    return RecordingSession(error=requests.ConnectionError("connection refused"))


@pytest.fixture
def make_config() -> Callable[..., NotifierConfig]:
    """Factory fixture: a deliverable NotifierConfig with overrides."""

    def _factory(**overrides: Any) -> NotifierConfig:
        defaults: dict[str, Any] = {
            "endpoint": "https://status.example.com/api/build/status",
            "access_token": "test-token",
            "version": "1.2.3",
        }
        defaults.update(overrides)
        return NotifierConfig(_env_file=None, **defaults)

    return _factory


@pytest.fixture
def correlation_id() -> uuid.UUID:
    return uuid.UUID("12345678-1234-5678-1234-567812345678")


@pytest.fixture
def all_hosts() -> dict[str, Any]:
    """One fully populated descriptor per supported provider."""
    return {
        "AppVeyor": AppVeyorHost(
            url="https://ci.appveyor.com",
            api_url="https://ci.appveyor.com/api",
            account_name="acme",
            project_id=7,
            project_name="Widget",
            project_slug="widget",
            build_folder="C:\\projects\\widget",
            build_id=101,
            build_number=42,
            build_version="1.0.42",
            job_id="job-1",
            job_name="Windows",
            repository_name="acme/widget",
            repository_branch="main",
            repository_commit_sha="c0ffee",
            repository_commit_author_email="dev@acme.test",
        ),
        "TeamCity": TeamCityHost(
            server_url="https://tc.acme.test",
            project_name="Widget",
            project_id="Widget_Id",
            build_type_id="Widget_Build",
            build_id=55,
            build_number="55",
            build_configuration="Release",
            branch_name="main",
            build_vcs_number="c0ffee",
            version="2024.1",
            auth_user_id="tc-user",
            auth_password="tc-secret",
        ),
        "AzurePipelines": AzurePipelinesHost(
            team_foundation_collection_uri="https://dev.azure.com/acme/",
            team_project="Widget",
            team_project_id="proj-guid",
            definition_name="CI",
            definition_id=3,
            build_id=900,
            build_number="20260301.1",
            build_uri="vstfs:///Build/Build/900",
            stage_name="Build",
            job_id="job-guid",
            task_instance_id="task-guid",
            agent_name="Hosted Agent",
            source_branch="refs/heads/main",
            requested_for="Dev",
            requested_for_email="dev@acme.test",
            access_token="azure-secret",
        ),
        "GitHubActions": GitHubActionsHost(
            server_url="https://github.com",
            repository="acme/widget",
            repository_owner="acme",
            workflow="CI",
            run_id=123456,
            run_number=17,
            job_id="build",
            job="build",
            ref="refs/heads/main",
            sha="c0ffee",
            actor="dev",
            event_name="push",
            workspace="/home/runner/work",
            token="ghs_secret",
        ),
        "GitLab": GitLabHost(
            project_url="https://gitlab.com/acme/widget",
            project_id=11,
            project_name="widget",
            project_path="acme/widget",
            pipeline_id=4242,
            commit_sha="c0ffee",
            commit_ref_name="main",
            user_email="dev@acme.test",
            job_token="gitlab-secret",
        ),
    }
