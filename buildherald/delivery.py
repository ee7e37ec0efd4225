"""Delivery Client: best-effort POST of status updates.

The build must never fail because a status update could not be sent:
``deliver()`` logs every failure as a warning and returns normally.

Three modes, checked in this order:

1. **debug**: print the filtered host information to stdout and stop.
2. **unconfigured**: with no endpoint or no token, skip silently (info log).
3. **network**: POST the JSON envelope with a bounded timeout.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import requests

from buildherald.config import NotifierConfig
from buildherald.models.status import BuildUpdateMessage

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class DeliveryClient:
    """Posts ``BuildUpdateMessage`` envelopes to the status endpoint.

    Parameters
    ----------
    config:
        Supplies endpoint, token presence, debug flag and request timeout.
    session:
        HTTP session to post through.  A fresh ``requests.Session`` is
        created when omitted.
    stdout:
        Stream used in debug mode.  Defaults to ``sys.stdout`` at call time.
    """

    def __init__(
        self,
        config: NotifierConfig,
        *,
        session: requests.Session | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._stdout = stdout

    @property
    def endpoint(self) -> str | None:
        return self._config.endpoint

    def deliver(self, message: BuildUpdateMessage) -> None:
        """Send *message*.  Never raises."""
        if self._config.debug:
            stream = self._stdout or sys.stdout
            stream.write(message.status.host_information + "\n")
            stream.flush()
            return

        if not self._config.can_deliver:
            logger.info(
                "Status delivery skipped for %s: endpoint or access token not configured",
                message.update_reason.value,
            )
            return

        endpoint = self._config.endpoint
        try:
            response = self._session.post(
                endpoint,
                data=message.model_dump_json(by_alias=True),
                headers=_JSON_HEADERS,
                timeout=self._config.request_timeout_seconds,
            )
            if response.status_code != requests.codes.ok:
                logger.warning(
                    "Reporting build status to %s failed: HTTP %s",
                    endpoint,
                    response.status_code,
                )
                return
            logger.debug(
                "Reported %s to %s", message.update_reason.value, endpoint
            )
        except requests.RequestException as exc:
            logger.warning("Reporting build status to %s failed: %s", endpoint, exc)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Reporting build status to %s failed unexpectedly: %s", endpoint, exc
            )

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> DeliveryClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        mode = "debug" if self._config.debug else (
            "network" if self._config.can_deliver else "disabled"
        )
        return f"DeliveryClient(endpoint={self._config.endpoint!r}, mode={mode})"
