"""Exception types raised by buildherald.

Only configuration problems are raised to the caller.  Collection and
delivery failures are logged and absorbed where they happen.
"""

from __future__ import annotations


class BuildHeraldError(Exception):
    """Base class for every error buildherald raises on purpose."""


class UnsupportedHostError(BuildHeraldError, ValueError):
    """Raised when the Field Filter is asked about an unknown CI host type.

    There is no serialize-everything fallback; callers must not recover
    from it.
    """

    def __init__(self, host: object) -> None:
        self.host = host
        super().__init__(f"No field allow-list for CI host: {host!r}")
