"""Notifier configuration: env-driven via pydantic-settings.

Reads ``BUILDHERALD_*`` environment variables and an optional ``.env``
file.  The endpoint and access token are absent by default; without both
the notifier collects and snapshots as usual but never posts.

Examples
--------
Override via environment::

    export BUILDHERALD_ENDPOINT=https://status.example.com/api/build/status
    export BUILDHERALD_ACCESS_TOKEN=...
    export BUILDHERALD_VERSION_PARAMETER=GITVERSION_FULLSEMVER
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotifierConfig(BaseSettings):
    """Settings recognized by the build-status notifier."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDHERALD_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Delivery target
    endpoint: str | None = None
    access_token: SecretStr | None = None
    request_timeout_seconds: float = 10.0

    # Status.Version: explicit value, or the name of a build parameter
    version: str | None = None
    version_parameter: str | None = None

    # Unlocks the sensitive tier of the Field Filter
    enable_authorized_actions: bool = False

    # Print filtered host information instead of posting
    debug: bool = False

    log_level: str = "INFO"

    @property
    def can_deliver(self) -> bool:
        """Whether both an endpoint and a non-empty token are configured."""
        return bool(self.endpoint) and bool(
            self.access_token and self.access_token.get_secret_value()
        )

    def resolve_version(
        self, parameters: Mapping[str, str] | None = None
    ) -> str | None:
        """Return the version string to report in ``BuildStatus.version``.

        An explicit ``version`` wins.  Otherwise the build parameter named
        by ``version_parameter`` is looked up in *parameters*, then in the
        process environment.
        """
        if self.version:
            return self.version
        if not self.version_parameter:
            return None
        if parameters and self.version_parameter in parameters:
            return parameters[self.version_parameter]
        return os.environ.get(self.version_parameter)
