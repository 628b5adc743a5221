"""Exception types raised by the GUI staging helpers."""

from __future__ import annotations

__all__ = ["ManifestError", "ManifestRestoreError", "StageError"]


class StageError(RuntimeError):
    """Raised when GUI assets cannot be staged or packed."""


class ManifestError(StageError):
    """Raised when a package manifest cannot be read or parsed."""


class ManifestRestoreError(StageError):
    """Raised when the manifests could not be put back after packing.

    The ignore-rules file or package descriptor may be left in their
    temporary packing state; inspect both before committing.
    """
