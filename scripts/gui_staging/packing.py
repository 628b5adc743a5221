"""Pack the plugin with staged assets temporarily admitted by its manifests.

The staging directory is normally excluded from published content: the
ignore-rules file lists it and the descriptor's ``files`` list omits it.
:func:`include_staged_assets` lifts both exclusions for the duration of a
``with`` block and restores the manifests on every exit path.

Examples
--------
Pack a plugin checkout whose ``public/`` directory has been staged::

    from pathlib import Path
    from gui_staging import load_layout, pack_plugin

    pack_plugin(load_layout(Path.cwd()))
"""

from __future__ import annotations

import copy
import dataclasses
import json
import re
import typing as typ
from contextlib import contextmanager

from plumbum import FG, local

from .errors import ManifestError, ManifestRestoreError

if typ.TYPE_CHECKING:
    from .config import BuildLayout

__all__ = [
    "ManifestSnapshot",
    "PackResult",
    "include_staged_assets",
    "pack_plugin",
    "read_manifests",
    "restore_manifests",
    "strip_ignore_entry",
    "with_files_glob",
]


@dataclasses.dataclass(slots=True, frozen=True)
class ManifestSnapshot:
    """Original manifest state captured before packing.

    Attributes
    ----------
    ignore_bytes : bytes | None
        Exact ignore-rules content, or ``None`` when the file is absent.
    descriptor : dict[str, typing.Any]
        Parsed package descriptor as read from disk.
    """

    ignore_bytes: bytes | None
    descriptor: dict[str, typ.Any]

    @property
    def files(self) -> list[str] | None:
        """Original descriptor ``files`` list, ``None`` when undeclared."""
        return self.descriptor.get("files")


@dataclasses.dataclass(slots=True, frozen=True)
class PackResult:
    """Outcome of :func:`pack_plugin`."""

    command: tuple[str, ...]
    ignore_entry_removed: bool
    files_glob_added: bool


def strip_ignore_entry(content: bytes, directory: str) -> bytes:
    """Remove every ``directory/`` line from ignore-rules ``content``.

    Works on raw bytes so ignore files in any encoding pass through intact.

    Examples
    --------
    >>> strip_ignore_entry(b"node_modules/\\npublic/\\n*.tgz\\n", "public")
    b'node_modules/\\n*.tgz\\n'
    >>> strip_ignore_entry(b"src/public/x\\n", "public")
    b'src/public/x\\n'
    """

    pattern = re.compile(
        rb"^" + re.escape(directory.encode("utf-8")) + rb"/[ \t]*(?:\r?\n|\Z)",
        flags=re.MULTILINE,
    )
    return pattern.sub(b"", content)


def with_files_glob(descriptor: dict[str, typ.Any], pattern: str) -> dict[str, typ.Any]:
    """Return a copy of ``descriptor`` whose ``files`` list includes ``pattern``.

    A descriptor without a ``files`` list already publishes everything that
    is not ignored, so it is returned unchanged rather than narrowed to
    ``pattern``.

    Examples
    --------
    >>> with_files_glob({"files": ["index.js"]}, "public/**/*")
    {'files': ['index.js', 'public/**/*']}
    >>> with_files_glob({"name": "plugin"}, "public/**/*")
    {'name': 'plugin'}
    """

    updated = copy.deepcopy(descriptor)
    files = updated.get("files")
    if isinstance(files, list) and pattern not in files:
        files.append(pattern)
    return updated


def read_manifests(layout: "BuildLayout") -> ManifestSnapshot:
    """Capture the ignore-rules file and descriptor for ``layout``.

    Raises
    ------
    ManifestError
        Raised when the descriptor is missing, is not valid JSON, or is not a
        JSON object.
    """

    ignore_path = layout.ignore_path
    ignore_bytes = ignore_path.read_bytes() if ignore_path.is_file() else None

    descriptor_path = layout.descriptor_path
    if not descriptor_path.is_file():
        message = f"Package descriptor not found at {descriptor_path}"
        raise ManifestError(message)
    try:
        descriptor = json.loads(descriptor_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        message = f"Invalid JSON in {descriptor_path}: {exc}"
        raise ManifestError(message) from exc
    if not isinstance(descriptor, dict):
        message = f"Package descriptor {descriptor_path} must hold a JSON object"
        raise ManifestError(message)
    return ManifestSnapshot(ignore_bytes, descriptor)


def restore_manifests(layout: "BuildLayout", snapshot: ManifestSnapshot) -> None:
    """Write ``snapshot`` back to disk.

    Both files are attempted even when the first write fails.

    Raises
    ------
    ManifestRestoreError
        Raised when either manifest could not be rewritten.
    """

    failures: list[str] = []
    if snapshot.ignore_bytes is not None:
        try:
            layout.ignore_path.write_bytes(snapshot.ignore_bytes)
        except OSError as exc:
            failures.append(f"{layout.ignore_path}: {exc}")
    try:
        _write_descriptor(layout, snapshot.descriptor)
    except OSError as exc:
        failures.append(f"{layout.descriptor_path}: {exc}")

    if failures:
        message = "Could not restore " + "; ".join(failures)
        raise ManifestRestoreError(message)


@contextmanager
def include_staged_assets(layout: "BuildLayout") -> typ.Iterator[PackResult]:
    """Admit the staging directory into published content while in scope.

    Yields
    ------
    PackResult
        Summary of the manifest changes in effect inside the block.

    Raises
    ------
    ManifestError
        Raised before any file is touched when the descriptor is unreadable.
    ManifestRestoreError
        Raised on exit when the original manifests could not be rewritten.
    """

    snapshot = read_manifests(layout)
    try:
        removed = _write_ignore_rules(layout, snapshot)
        updated = with_files_glob(snapshot.descriptor, layout.files_glob)
        _write_descriptor(layout, updated)
        yield PackResult(
            command=layout.pack_command,
            ignore_entry_removed=removed,
            files_glob_added=updated.get("files") != snapshot.files,
        )
    finally:
        restore_manifests(layout, snapshot)
        print(f"Restored {layout.ignore_file} and {layout.descriptor_file}")


def pack_plugin(layout: "BuildLayout") -> PackResult:
    """Run the archiving command with staged assets admitted.

    Parameters
    ----------
    layout : BuildLayout
        Layout naming the manifests, the staging directory, and the
        archiving command.

    Returns
    -------
    PackResult
        Command that ran and the manifest changes applied while it ran.

    Raises
    ------
    plumbum.commands.ProcessExecutionError
        Raised after the manifests are restored when the archiver exits with
        a non-zero status.
    plumbum.CommandNotFound
        Raised after the manifests are restored when the archiver is not on
        ``PATH``.
    """

    with include_staged_assets(layout) as result:
        print(f"Packing with: {' '.join(layout.pack_command)}", flush=True)
        _run_archiver(layout)
    return result


def _run_archiver(layout: "BuildLayout") -> None:
    program, *args = layout.pack_command
    archiver = local[program][tuple(args)]
    with local.cwd(layout.root):
        archiver & FG


def _write_ignore_rules(layout: "BuildLayout", snapshot: ManifestSnapshot) -> bool:
    if snapshot.ignore_bytes is None:
        return False
    stripped = strip_ignore_entry(snapshot.ignore_bytes, layout.public_dir)
    if stripped == snapshot.ignore_bytes:
        return False
    layout.ignore_path.write_bytes(stripped)
    return True


def _write_descriptor(layout: "BuildLayout", descriptor: dict[str, typ.Any]) -> None:
    text = json.dumps(descriptor, indent=2, ensure_ascii=False)
    layout.descriptor_path.write_text(f"{text}\n", encoding="utf-8")
