"""BuildNotifier: lifecycle hook that reports build status to a collector.

The build engine calls three handlers on the engine's own thread:

``on_build_created(targets)``
    Exactly once, first.  Collects run metadata and posts ``BuildCreated``.
``on_target_running(target)``
    Zero or more times.  Posts ``TargetStarted``.
``on_build_finished(exit_code)``
    Exactly once, last.  Posts ``BuildFinished`` and closes the run.

Collection and delivery problems never escape a handler; they are logged
as warnings.  An unknown CI host type is a configuration error and is
raised (see :class:`~buildherald.errors.UnsupportedHostError`).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Callable

from buildherald.collector import MetadataCollector, RunMetadata
from buildherald.config import NotifierConfig
from buildherald.delivery import DeliveryClient
from buildherald.errors import UnsupportedHostError
from buildherald.log_capture import LogCapture
from buildherald.models.hosts import HostBase
from buildherald.models.status import BuildUpdateMessage, UpdateReason
from buildherald.snapshot import ExecutableTarget, StatusSnapshotter

logger = logging.getLogger(__name__)

# One id per process; every message of the run carries it.
PROCESS_CORRELATION_ID: uuid.UUID = uuid.uuid4()


class BuildNotifier:
    """Attachable build-status notifier.

    Parameters
    ----------
    config:
        Notifier settings.  Loaded from the environment when omitted.
    host:
        The current CI host descriptor, or ``None`` for a local run.
    parameters:
        Build parameter values, used to resolve ``config.version_parameter``.
    collector:
        Metadata collector.  Defaults to git in the current directory.
    delivery:
        Delivery client.  Defaults to one built from *config*.
    log_capture:
        Log message capture attached for the lifetime of the run.
    correlation_id:
        Override of the process-wide correlation id (tests).
    clock:
        Source of message timestamps (UTC-aware ``datetime``).
    """

    def __init__(
        self,
        config: NotifierConfig | None = None,
        *,
        host: HostBase | None = None,
        parameters: Mapping[str, str] | None = None,
        collector: MetadataCollector | None = None,
        delivery: DeliveryClient | None = None,
        log_capture: LogCapture | None = None,
        correlation_id: uuid.UUID | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or NotifierConfig()
        self.host = host
        self.correlation_id = correlation_id or PROCESS_CORRELATION_ID
        self._collector = collector or MetadataCollector()
        self._delivery = delivery or DeliveryClient(self.config)
        self._log_capture = log_capture or LogCapture()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._snapshotter = StatusSnapshotter(
            self._log_capture,
            version=self.config.resolve_version(parameters),
            enable_authorized_actions=self.config.enable_authorized_actions,
        )

        self._targets: Sequence[ExecutableTarget] = ()
        self._metadata: RunMetadata | None = None
        self._finished = False
        self._last_time_created: datetime | None = None

    # ------------------------------------------------------------------
    # Lifecycle handlers
    # ------------------------------------------------------------------

    def on_build_created(self, targets: Sequence[ExecutableTarget]) -> None:
        """Start the run: capture metadata and post ``BuildCreated``."""
        if self._metadata is not None:
            logger.warning("on_build_created called twice, ignoring repeat call")
            return
        self._log_capture.attach()
        self._targets = targets
        self._metadata = self._collect()
        self._post(UpdateReason.BUILD_CREATED)

    def on_target_running(self, target: ExecutableTarget) -> None:
        """Post ``TargetStarted`` for *target*."""
        if not self._accepting("on_target_running"):
            return
        logger.debug("Target %s started", getattr(target, "name", target))
        self._post(UpdateReason.TARGET_STARTED)

    def on_build_finished(self, exit_code: int | None = None) -> None:
        """Post ``BuildFinished`` and close the run."""
        if not self._accepting("on_build_finished"):
            return
        try:
            self._post(UpdateReason.BUILD_FINISHED, exit_code=exit_code)
        finally:
            self._finished = True
            self._log_capture.detach()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def metadata(self) -> RunMetadata | None:
        """Run metadata captured at build-created time."""
        return self._metadata

    @property
    def is_finished(self) -> bool:
        return self._finished

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _accepting(self, handler: str) -> bool:
        if self._metadata is None:
            logger.warning("%s called before on_build_created, ignoring", handler)
            return False
        if self._finished:
            logger.warning("%s called after on_build_finished, ignoring", handler)
            return False
        return True

    def _collect(self) -> RunMetadata:
        try:
            return self._collector.collect()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Collecting build metadata failed: %s", exc)
            return RunMetadata(started=self._clock())

    def _next_timestamp(self) -> datetime:
        now = self._clock()
        if self._last_time_created is not None and now < self._last_time_created:
            now = self._last_time_created
        self._last_time_created = now
        return now

    def build_message(
        self, reason: UpdateReason, exit_code: int | None = None
    ) -> BuildUpdateMessage:
        """Snapshot the run and wrap it in an envelope for *reason*."""
        if self._metadata is None:
            raise RuntimeError("no build run in progress")
        status = self._snapshotter.snapshot(
            self._metadata, self.host, self._targets, exit_code=exit_code
        )
        return BuildUpdateMessage(
            access_token=self.config.access_token,
            correlation_id=self.correlation_id,
            update_reason=reason,
            time_created=self._next_timestamp(),
            status=status,
        )

    def _post(self, reason: UpdateReason, exit_code: int | None = None) -> None:
        try:
            message = self.build_message(reason, exit_code=exit_code)
        except UnsupportedHostError:
            self._log_capture.detach()
            raise
        except Exception as exc:  # noqa: BLE001
            logger.warning("Building %s status update failed: %s", reason.value, exc)
            return
        self._delivery.deliver(message)

    def __repr__(self) -> str:
        host = self.host.kind.value if self.host is not None else "Local"
        return (
            f"BuildNotifier(host={host!r}, "
            f"correlation_id={str(self.correlation_id)!r}, "
            f"finished={self._finished})"
        )
