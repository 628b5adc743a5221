"""Filtered clean-rebuild staging of the GUI bundle."""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

from .errors import StageError
from .fs_utils import copy_entry, count_entries, has_entries, reset_directory
from .resolution import SourceKind, SourceLocation

if typ.TYPE_CHECKING:
    from .config import BuildLayout

__all__ = ["StageResult", "should_skip_staging", "stage_assets"]


@dataclasses.dataclass(slots=True)
class StageResult:
    """Outcome of :func:`stage_assets`."""

    staging_dir: Path
    staged_entries: list[Path]
    file_count: int


def should_skip_staging(staging_dir: Path, *, local: bool, pack: bool) -> bool:
    """Return ``True`` when existing staged assets should be left alone.

    A populated staging directory is trusted as the product of an earlier run
    (for example when installing from a packed archive that already embeds
    the assets and lacks the GUI dependency). Local staging and packing
    always rebuild.

    Examples
    --------
    >>> should_skip_staging(Path("/nonexistent"), local=False, pack=False)
    False
    """

    if local or pack:
        return False
    return has_entries(staging_dir)


def stage_assets(source: SourceLocation, layout: "BuildLayout") -> StageResult:
    """Copy the whitelisted part of ``source`` into ``layout.staging_dir``.

    Parameters
    ----------
    source : SourceLocation
        GUI bundle chosen by :func:`gui_staging.resolution.resolve_source`.
    layout : BuildLayout
        Layout naming the staging directory and the inclusion rules.

    Returns
    -------
    StageResult
        Staging directory, staged top-level entries, and the number of files
        and directories now beneath the staging directory.

    Raises
    ------
    StageError
        Raised when ``source`` does not exist. Nothing is removed in that
        case.
    OSError
        Propagated from the underlying copy; the staging directory may be
        left partially populated.
    """

    _ensure_source_available(source, layout)

    staging_dir = layout.staging_dir
    reset_directory(staging_dir)

    staged: list[Path] = []
    for entry in sorted(source.path.iterdir()):
        if not layout.rules.accepts(entry):
            continue
        destination = staging_dir / entry.name
        copy_entry(entry, destination)
        staged.append(destination)

    return StageResult(staging_dir, staged, count_entries(staging_dir))


def _ensure_source_available(source: SourceLocation, layout: "BuildLayout") -> None:
    if source.path.is_dir():
        return
    if source.kind is SourceKind.DEPENDENCY:
        message = (
            f"{layout.package} not found in {layout.dependency_dir} "
            f"(looked in {source.path}). Make sure it is listed in "
            f"{layout.descriptor_file} dependencies."
        )
    else:
        message = f"Source directory not found: {source.path}"
    raise StageError(message)
