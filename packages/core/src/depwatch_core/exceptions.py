"""Error taxonomy for depwatch.

Fatal errors (unsupported trigger, build stages, checkout exhaustion, snapshot
reading) propagate to the CLI, which marks the run as failed. Tier errors and
reporting errors are caught at each fallback boundary and only decide which
tier is tried next.
"""

from __future__ import annotations


class DepwatchError(Exception):
    """Base exception for all depwatch errors."""


class UnsupportedTriggerError(DepwatchError):
    """Raised when the workflow was triggered by an event we cannot compare against."""


class CommandError(DepwatchError):
    """Raised when an external command exits non-zero or cannot be started."""


class BuildStageError(DepwatchError):
    """Raised when install, build, clean or reset fails during a build cycle."""


class CheckoutTierError(DepwatchError):
    """Raised by a single checkout tier. Recoverable: the next tier is tried."""


class CheckoutError(DepwatchError):
    """Raised when no checkout tier could move the working tree to the base revision."""


class SnapshotError(DepwatchError):
    """Raised when a dependency manifest cannot be read."""


class ReportingError(DepwatchError):
    """Raised by a single reporting tier. Always recovered by the next tier."""
