"""CI host descriptors: one tagged variant per supported provider.

A host descriptor carries everything the provider exposes about the
current build, sensitive values included.  What actually leaves the
process is decided by :mod:`buildherald.filtering`, never by the model.

Detecting the host from the environment is the build engine's job;
descriptors arrive here already populated (or as ``None`` for local runs).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class HostKind(str, Enum):
    """The CI providers the notifier knows how to filter."""

    APPVEYOR = "AppVeyor"
    TEAMCITY = "TeamCity"
    AZURE_PIPELINES = "AzurePipelines"
    GITHUB_ACTIONS = "GitHubActions"
    GITLAB = "GitLab"


class HostBase(BaseModel):
    """Fields shared by every host variant (just the discriminator)."""

    model_config = ConfigDict(frozen=True)

    kind: HostKind


class AppVeyorHost(HostBase):
    kind: Literal[HostKind.APPVEYOR] = HostKind.APPVEYOR
    url: str | None = None
    api_url: str | None = None
    account_name: str | None = None
    project_id: int | None = None
    project_name: str | None = None
    project_slug: str | None = None
    build_folder: str | None = None
    build_id: int | None = None
    build_number: int | None = None
    build_version: str | None = None
    job_id: str | None = None
    job_name: str | None = None
    repository_name: str | None = None
    repository_branch: str | None = None
    repository_commit_sha: str | None = None
    repository_commit_author_email: str | None = None


class TeamCityHost(HostBase):
    kind: Literal[HostKind.TEAMCITY] = HostKind.TEAMCITY
    server_url: str | None = None
    project_name: str | None = None
    project_id: str | None = None
    build_type_id: str | None = None
    build_id: int | None = None
    build_number: str | None = None
    build_configuration: str | None = None
    branch_name: str | None = None
    build_vcs_number: str | None = None
    version: str | None = None
    auth_user_id: str | None = None
    auth_password: str | None = None


class AzurePipelinesHost(HostBase):
    kind: Literal[HostKind.AZURE_PIPELINES] = HostKind.AZURE_PIPELINES
    team_foundation_collection_uri: str | None = None
    team_project: str | None = None
    team_project_id: str | None = None
    definition_name: str | None = None
    definition_id: int | None = None
    build_id: int | None = None
    build_number: str | None = None
    build_uri: str | None = None
    stage_name: str | None = None
    job_id: str | None = None
    task_instance_id: str | None = None
    agent_name: str | None = None
    source_branch: str | None = None
    requested_for: str | None = None
    requested_for_email: str | None = None
    access_token: str | None = None


class GitHubActionsHost(HostBase):
    kind: Literal[HostKind.GITHUB_ACTIONS] = HostKind.GITHUB_ACTIONS
    server_url: str | None = None
    repository: str | None = None
    repository_owner: str | None = None
    workflow: str | None = None
    run_id: int | None = None
    run_number: int | None = None
    job_id: str | None = None
    job: str | None = None
    ref: str | None = None
    sha: str | None = None
    actor: str | None = None
    event_name: str | None = None
    workspace: str | None = None
    token: str | None = None


class GitLabHost(HostBase):
    kind: Literal[HostKind.GITLAB] = HostKind.GITLAB
    project_url: str | None = None
    project_id: int | None = None
    project_name: str | None = None
    project_path: str | None = None
    pipeline_id: int | None = None
    commit_sha: str | None = None
    commit_ref_name: str | None = None
    user_email: str | None = None
    job_token: str | None = None


HostDescriptor = Annotated[
    Union[
        AppVeyorHost,
        TeamCityHost,
        AzurePipelinesHost,
        GitHubActionsHost,
        GitLabHost,
    ],
    Field(discriminator="kind"),
]

_HOST_ADAPTER: TypeAdapter[Any] = TypeAdapter(HostDescriptor)


def parse_host(data: dict[str, Any]) -> HostBase:
    """Validate a mapping into the matching host variant.

    The mapping must carry a ``kind`` key naming a :class:`HostKind`
    value.  Raises ``pydantic.ValidationError`` otherwise.
    """
    return _HOST_ADAPTER.validate_python(data)
