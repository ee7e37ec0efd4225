"""Build status records: the payload posted to the status collector.

Every record is a frozen Pydantic model.  Python-side field names are
snake_case; the wire names are PascalCase aliases so the JSON body keeps
the collector's contract (``AccessToken``, ``Cookie``, ``UpdateReason`` ...).
Serialize with ``model_dump_json(by_alias=True)``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_pascal


class UpdateReason(str, Enum):
    """The lifecycle event that triggered a status update."""

    BUILD_CREATED = "BuildCreated"
    TARGET_STARTED = "TargetStarted"
    BUILD_FINISHED = "BuildFinished"


class ExecutionStatus(str, Enum):
    """Execution state of a single build target, as reported by the engine."""

    NOT_RUN = "NotRun"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    SKIPPED = "Skipped"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
    )


class Commit(_WireModel):
    """A single commit parsed from ``git log``."""

    sha: str
    message: str  # subject line
    author: str
    email: str

    @field_validator("sha", "message", "author", "email")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("commit fields must be non-empty")
        return value


class TargetStatus(_WireModel):
    """Live view of one executable target at snapshot time."""

    name: str
    status: ExecutionStatus
    duration: timedelta = timedelta(0)
    data: dict[str, str] = {}


class BuildStatus(_WireModel):
    """Immutable snapshot of the whole build, rebuilt for every event."""

    started: datetime
    host: str
    host_information: str  # pre-filtered JSON, opaque to the envelope
    version: str | None = None
    repository: str | None = None
    branch: str | None = None
    commits: list[Commit] | None = None  # None means "could not be collected"
    targets: list[TargetStatus] = []
    error_message: str = ""
    exit_code: int | None = None


class BuildUpdateMessage(_WireModel):
    """Envelope posted once per lifecycle event."""

    access_token: SecretStr | None = None
    correlation_id: uuid.UUID = Field(alias="Cookie")
    update_reason: UpdateReason
    time_created: datetime
    status: BuildStatus

    @field_serializer("access_token", when_used="json")
    def _reveal_token(self, token: SecretStr | None) -> str | None:
        return token.get_secret_value() if token is not None else None
