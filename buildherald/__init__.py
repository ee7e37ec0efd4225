"""buildherald: build-status notifications for CI pipelines.

Hooks into a build engine's lifecycle (build created, target started,
build finished), snapshots the build with CI-host and commit metadata,
filters the host view through a per-provider allow-list and posts it to
a remote status collector.  Delivery is best effort: it never fails the
build.
"""

__version__ = "0.1.0"
__description__ = "Best-effort build-status notifications for CI pipelines"

from buildherald.config import NotifierConfig
from buildherald.errors import BuildHeraldError, UnsupportedHostError
from buildherald.notifier import BuildNotifier

__all__ = [
    "BuildNotifier",
    "NotifierConfig",
    "BuildHeraldError",
    "UnsupportedHostError",
    "__version__",
]
