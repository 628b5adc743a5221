"""Filesystem helpers for staging."""

from __future__ import annotations

import shutil
from pathlib import Path

__all__ = ["copy_entry", "count_entries", "has_entries", "reset_directory"]


def reset_directory(path: Path) -> None:
    """Replace ``path`` with an empty directory.

    Parameters
    ----------
    path : Path
        Directory to clear; created along with any missing parents.

    Examples
    --------
    >>> staging_dir = Path("/tmp/stage")
    >>> (staging_dir / "old").mkdir(parents=True, exist_ok=True)
    >>> reset_directory(staging_dir)
    >>> list(staging_dir.iterdir())
    []
    """

    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_entry(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination``, mirroring directories in full."""
    if source.is_dir():
        shutil.copytree(source, destination, copy_function=shutil.copy2)
    else:
        shutil.copy2(source, destination)


def count_entries(path: Path) -> int:
    """Return the number of files and directories below ``path``."""
    return sum(1 for _ in path.rglob("*"))


def has_entries(path: Path) -> bool:
    """Return ``True`` when ``path`` is a directory with at least one entry."""
    return path.is_dir() and next(path.iterdir(), None) is not None
