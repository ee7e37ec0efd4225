"""In-memory capture of warning and error log messages for one build run.

The captured texts become ``BuildStatus.error_message``.  The capture is
an explicit collaborator: attach it when the run starts, read it at each
snapshot, detach it when the run ends.
"""

from __future__ import annotations

import logging


class LogCapture(logging.Handler):
    """Collects the message text of every record at or above *level*.

    Parameters
    ----------
    level:
        Minimum record level to keep.  Defaults to ``logging.WARNING``.
    """

    def __init__(self, level: int = logging.WARNING) -> None:
        super().__init__(level=level)
        self._messages: list[str] = []
        self._attached_to: logging.Logger | None = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._messages.append(record.getMessage())
        except Exception:  # noqa: BLE001
            self.handleError(record)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self, logger: logging.Logger | None = None) -> None:
        """Start capturing from *logger* (the root logger by default)."""
        if self._attached_to is not None:
            return
        target = logger or logging.getLogger()
        target.addHandler(self)
        self._attached_to = target

    def detach(self) -> None:
        """Stop capturing.  Already collected messages are kept."""
        if self._attached_to is None:
            return
        self._attached_to.removeHandler(self)
        self._attached_to = None

    def clear(self) -> None:
        self._messages.clear()

    @property
    def is_attached(self) -> bool:
        return self._attached_to is not None

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def messages(self) -> list[str]:
        """Return a copy of the captured message texts, oldest first."""
        return list(self._messages)

    @property
    def error_text(self) -> str:
        """All captured messages joined with newlines."""
        return "\n".join(self._messages)
