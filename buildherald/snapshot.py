"""Status Snapshotter: builds a fresh ``BuildStatus`` for every event.

Run metadata (start time, repository, commits) comes from the collector
and is reused as-is.  Targets and captured log messages are read live at
snapshot time, so each snapshot reflects the latest engine state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Protocol, runtime_checkable

from buildherald.collector import RunMetadata
from buildherald.filtering import serialize_host_information
from buildherald.log_capture import LogCapture
from buildherald.models.hosts import HostBase
from buildherald.models.status import BuildStatus, ExecutionStatus, TargetStatus

LOCAL_HOST_NAME = "Local"
_GIT_SUFFIX = ".git"


@runtime_checkable
class ExecutableTarget(Protocol):
    """What the notifier reads from a build engine's target."""

    name: str
    status: ExecutionStatus | str
    duration: timedelta
    summary_data: Mapping[str, str]


def strip_git_suffix(url: str | None) -> str | None:
    """Remove one trailing ``.git`` from *url*, if present."""
    if url and url.endswith(_GIT_SUFFIX):
        return url[: -len(_GIT_SUFFIX)]
    return url


def target_status(target: ExecutableTarget) -> TargetStatus:
    return TargetStatus(
        name=target.name,
        status=ExecutionStatus(target.status),
        duration=target.duration,
        data={str(k): str(v) for k, v in (target.summary_data or {}).items()},
    )


class StatusSnapshotter:
    """Assembles ``BuildStatus`` records.

    Parameters
    ----------
    log_capture:
        Source of the warning/error texts reported as ``error_message``.
    version:
        Version string reported for every snapshot of the run.
    enable_authorized_actions:
        Passed through to the Field Filter.
    """

    def __init__(
        self,
        log_capture: LogCapture,
        *,
        version: str | None = None,
        enable_authorized_actions: bool = False,
    ) -> None:
        self._log_capture = log_capture
        self._version = version
        self._enable_authorized_actions = enable_authorized_actions

    def snapshot(
        self,
        metadata: RunMetadata,
        host: HostBase | None,
        targets: Iterable[ExecutableTarget],
        exit_code: int | None = None,
    ) -> BuildStatus:
        """Build the status for the current moment of the run.

        Raises
        ------
        UnsupportedHostError
            If *host* is of a type the Field Filter does not know.
        """
        host_information = serialize_host_information(
            host, self._enable_authorized_actions
        )
        repository = metadata.repository
        return BuildStatus(
            started=metadata.started,
            host=host.kind.value if host is not None else LOCAL_HOST_NAME,
            host_information=host_information,
            version=self._version,
            repository=strip_git_suffix(repository.url) if repository else None,
            branch=repository.branch if repository else None,
            commits=metadata.commits,
            targets=[target_status(t) for t in targets],
            error_message=self._log_capture.error_text,
            exit_code=exit_code,
        )
