"""buildherald data models: all Pydantic v2, all frozen (immutable)."""

from buildherald.models.hosts import (
    AppVeyorHost,
    AzurePipelinesHost,
    GitHubActionsHost,
    GitLabHost,
    HostBase,
    HostDescriptor,
    HostKind,
    TeamCityHost,
    parse_host,
)
from buildherald.models.status import (
    BuildStatus,
    BuildUpdateMessage,
    Commit,
    ExecutionStatus,
    TargetStatus,
    UpdateReason,
)

__all__ = [
    # hosts
    "HostKind",
    "HostBase",
    "HostDescriptor",
    "AppVeyorHost",
    "TeamCityHost",
    "AzurePipelinesHost",
    "GitHubActionsHost",
    "GitLabHost",
    "parse_host",
    # status
    "UpdateReason",
    "ExecutionStatus",
    "Commit",
    "TargetStatus",
    "BuildStatus",
    "BuildUpdateMessage",
]
