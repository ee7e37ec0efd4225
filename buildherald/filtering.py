"""Field Filter: decides which host fields may leave the process.

Each CI provider has two allow-lists:

* **public** fields (URLs, ids, names, branch/ref identifiers) that are
  always serialized, and
* **sensitive** fields (tokens, credentials) that are serialized only when
  the operator sets ``enable_authorized_actions``.

Everything else is dropped.  Field names are compared ignoring case and
underscores, so ``build_id``, ``BuildId`` and ``BUILDID`` are one field.
An unknown provider raises :class:`UnsupportedHostError`.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from pydantic.alias_generators import to_snake

from buildherald.errors import UnsupportedHostError
from buildherald.models.hosts import HostBase, HostKind

_PUBLIC = "public"
_SENSITIVE = "sensitive"

ALLOW_LISTS: dict[HostKind, dict[str, tuple[str, ...]]] = {
    HostKind.APPVEYOR: {
        _PUBLIC: (
            "Url",
            "AccountName",
            "ProjectSlug",
            "BuildId",
            "BuildVersion",
            "JobName",
            "JobId",
            "RepositoryBranch",
            "ProjectName",
        ),
        _SENSITIVE: (),
    },
    HostKind.TEAMCITY: {
        _PUBLIC: (
            "ServerUrl",
            "ProjectName",
            "ProjectId",
            "BuildTypeId",
            "BuildId",
            "BuildNumber",
            "BuildConfiguration",
            "BranchName",
        ),
        _SENSITIVE: ("AuthUserId", "AuthPassword"),
    },
    HostKind.AZURE_PIPELINES: {
        _PUBLIC: (
            "TeamFoundationCollectionUri",
            "TeamProject",
            "DefinitionName",
            "DefinitionId",
            "BuildId",
            "BuildNumber",
            "StageName",
            "JobId",
            "TaskInstanceId",
        ),
        _SENSITIVE: ("AccessToken",),
    },
    HostKind.GITHUB_ACTIONS: {
        _PUBLIC: (
            "ServerUrl",
            "Repository",
            "Workflow",
            "RunId",
            "RunNumber",
            "JobId",
            "Job",
            "Ref",
        ),
        _SENSITIVE: ("Token",),
    },
    HostKind.GITLAB: {
        _PUBLIC: ("ProjectUrl", "PipelineId", "ProjectName"),
        _SENSITIVE: (),
    },
}


def _normalize(field_name: str) -> str:
    return field_name.replace("_", "").casefold()


def _resolve_kind(host: HostBase | HostKind | str) -> HostKind:
    raw = host.kind if isinstance(host, HostBase) else host
    try:
        kind = HostKind(raw)
    except ValueError:
        raise UnsupportedHostError(raw) from None
    if kind not in ALLOW_LISTS:
        raise UnsupportedHostError(kind)
    return kind


def field_filter(
    host: HostBase | HostKind | str,
    enable_authorized_actions: bool = False,
) -> Callable[[str], bool]:
    """Return a predicate over field names for the given host type.

    Parameters
    ----------
    host:
        A host descriptor, a :class:`HostKind`, or its string value.
    enable_authorized_actions:
        When ``True`` the provider's sensitive tier is added to the
        allowed set.

    Raises
    ------
    UnsupportedHostError
        If the host type has no allow-list.
    """
    lists = ALLOW_LISTS[_resolve_kind(host)]
    allowed = {_normalize(name) for name in lists[_PUBLIC]}
    if enable_authorized_actions:
        allowed |= {_normalize(name) for name in lists[_SENSITIVE]}

    def _predicate(field_name: str) -> bool:
        return _normalize(field_name) in allowed

    return _predicate


def project_host(
    host: HostBase,
    enable_authorized_actions: bool = False,
) -> dict[str, Any]:
    """Project a host descriptor onto its allow-listed fields.

    The allow-list for ``host.kind`` drives the projection: keys are the
    listed PascalCase wire names in table order (public tier first), and
    nothing outside the list is ever read from *host*.
    """
    lists = ALLOW_LISTS[_resolve_kind(host)]
    wire_names = lists[_PUBLIC]
    if enable_authorized_actions:
        wire_names += lists[_SENSITIVE]
    return {name: getattr(host, to_snake(name)) for name in wire_names}


def serialize_host_information(
    host: HostBase | None,
    enable_authorized_actions: bool = False,
) -> str:
    """Serialize the filtered host view to the JSON string embedded in status.

    A local run (``host is None``) serializes to ``"{}"``.
    """
    if host is None:
        return "{}"
    return json.dumps(project_host(host, enable_authorized_actions), default=str)
