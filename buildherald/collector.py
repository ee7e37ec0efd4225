"""Metadata Collector: start time, repository and recent commits.

Runs once per build, when the build is created.  Git is reached through
the :class:`GitInspector` protocol; :class:`SubprocessGit` is the default
implementation and shells out to the ``git`` binary.

Nothing in here raises.  If the repository cannot be resolved it is
``None``; if no commit could be parsed the commit list is ``None``
(never an empty list).
"""

from __future__ import annotations

import logging
import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from buildherald.models.status import Commit

logger = logging.getLogger(__name__)

# sha<TAB>author<TAB>email<TAB>subject
COMMIT_LOG_FORMAT = "%H%x09%an%x09%ae%x09%s"
_COMMIT_LINE = re.compile(
    r"^(?P<sha>[^\t]+)\t(?P<author>[^\t]+)\t(?P<email>[^\t]+)\t(?P<message>[^\t]+)$"
)
_SCP_REMOTE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


class RepositoryDescriptor(BaseModel):
    """The local repository as seen at build-created time."""

    model_config = ConfigDict(frozen=True)

    url: str
    branch: str | None = None
    commit_id: str


class RunMetadata(BaseModel):
    """Everything captured once per run and reused by every snapshot."""

    model_config = ConfigDict(frozen=True)

    started: datetime
    repository: RepositoryDescriptor | None = None
    commits: list[Commit] | None = None


@runtime_checkable
class GitInspector(Protocol):
    """Narrow interface onto git used by the collector."""

    def repository(self) -> RepositoryDescriptor:
        """Describe the current repository.  May raise on any failure."""
        ...

    def previous_tag(self, commit_id: str) -> str | None:
        """Return the newest tag reachable from the parent of *commit_id*."""
        ...

    def log(self, revision_range: str, pretty_format: str) -> list[str]:
        """Return ``git log`` output lines for *revision_range*."""
        ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_https_url(remote_url: str) -> str:
    """Normalize a git remote URL to its HTTPS form.

    ``git@github.com:org/repo.git`` and ``ssh://git@github.com/org/repo.git``
    both become ``https://github.com/org/repo.git``.  HTTPS and unknown
    forms are returned unchanged.
    """
    url = remote_url.strip()
    if url.startswith(("https://", "http://")):
        return url
    if url.startswith("ssh://"):
        rest = url[len("ssh://"):]
        host_part, _, path = rest.partition("/")
        host = host_part.rsplit("@", 1)[-1].split(":", 1)[0]
        return f"https://{host}/{path}"
    match = _SCP_REMOTE.match(url)
    if match:
        return f"https://{match.group('host')}/{match.group('path')}"
    return url


def parse_commit_log(lines: list[str]) -> list[Commit] | None:
    """Parse ``sha<TAB>author<TAB>email<TAB>subject`` lines.

    Lines that do not match the pattern exactly are dropped.  Returns
    ``None`` when nothing usable remains.
    """
    commits: list[Commit] = []
    for line in lines:
        match = _COMMIT_LINE.match(line.rstrip("\r\n"))
        if match is None:
            logger.debug("Dropping unparseable commit line: %r", line)
            continue
        commits.append(
            Commit(
                sha=match.group("sha"),
                message=match.group("message"),
                author=match.group("author"),
                email=match.group("email"),
            )
        )
    return commits or None


# ---------------------------------------------------------------------------
# Default git implementation
# ---------------------------------------------------------------------------


class SubprocessGit:
    """``GitInspector`` backed by the ``git`` command line.

    Parameters
    ----------
    root:
        Working directory to run git in.  Defaults to the current directory.
    remote:
        Name of the remote whose URL identifies the repository.
    timeout_seconds:
        Upper bound for every git invocation.
    """

    def __init__(
        self,
        root: Path | str | None = None,
        *,
        remote: str = "origin",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._root = Path(root) if root else Path.cwd()
        self._remote = remote
        self._timeout = timeout_seconds

    def _git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self._root,
            capture_output=True,
            text=True,
            timeout=self._timeout,
            check=True,
        )
        return result.stdout

    def repository(self) -> RepositoryDescriptor:
        url = self._git("remote", "get-url", self._remote).strip()
        commit_id = self._git("rev-parse", "HEAD").strip()
        branch = self._git("rev-parse", "--abbrev-ref", "HEAD").strip()
        return RepositoryDescriptor(
            url=to_https_url(url),
            branch=None if branch == "HEAD" else branch,
            commit_id=commit_id,
        )

    def previous_tag(self, commit_id: str) -> str | None:
        try:
            tag = self._git("describe", "--tags", "--abbrev=0", f"{commit_id}^").strip()
        except subprocess.CalledProcessError:
            return None
        return tag or None

    def log(self, revision_range: str, pretty_format: str) -> list[str]:
        output = self._git("log", revision_range, f"--pretty=tformat:{pretty_format}")
        return output.splitlines()

    def __repr__(self) -> str:
        return f"SubprocessGit(root={str(self._root)!r}, remote={self._remote!r})"


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------


class MetadataCollector:
    """Snapshots start time, repository and commit history for a run.

    Parameters
    ----------
    git:
        The git collaborator.  Defaults to :class:`SubprocessGit` in the
        current directory.
    clock:
        Source of the start timestamp (UTC-aware ``datetime``).
    """

    def __init__(
        self,
        git: GitInspector | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._git = git or SubprocessGit()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def collect(self) -> RunMetadata:
        """Gather run metadata.  Never raises."""
        started = self._clock()
        repository = self._resolve_repository()
        commits = self._resolve_commits(repository) if repository else None
        return RunMetadata(started=started, repository=repository, commits=commits)

    def _resolve_repository(self) -> RepositoryDescriptor | None:
        try:
            return self._git.repository()
        except Exception as exc:  # noqa: BLE001
            logger.debug("Repository metadata unavailable: %s", exc)
            return None

    def _resolve_commits(self, repository: RepositoryDescriptor) -> list[Commit] | None:
        commit_id = repository.commit_id
        try:
            tag = self._git.previous_tag(commit_id)
            revision_range = f"{tag}..{commit_id}" if tag else f"{commit_id}^..{commit_id}"
            lines = self._git.log(revision_range, COMMIT_LOG_FORMAT)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Commit history unavailable: %s", exc)
            return None
        return parse_commit_log(lines)
