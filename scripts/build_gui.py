# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "cyclopts>=3.24.0,<4.0.0",
#   "plumbum>=1.8",
# ]
# ///

"""Stage the MaYaRa GUI bundle into the plugin's ``public/`` directory.

The GUI is copied from the installed ``@marineyachtradar/mayara-gui``
dependency, or from a sibling ``../mayara-gui`` checkout with
``--local-gui``. ``--pack`` additionally runs ``npm pack`` with ``public/``
temporarily admitted by ``.npmignore`` and ``package.json``.

Examples
--------
Run as the plugin's ``postinstall`` step from the plugin root::

    python scripts/build_gui.py

Stage a development GUI and produce a tarball::

    python scripts/build_gui.py --local-gui --pack
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter
from gui_staging import (
    ManifestError,
    ManifestRestoreError,
    SourceKind,
    StageError,
    load_layout,
    pack_plugin,
    resolve_source,
    should_skip_staging,
    stage_assets,
)
from plumbum.commands import CommandNotFound, ProcessExecutionError

app = App(help="Stage the MaYaRa GUI into public/ and optionally pack the plugin.")


def _fail(exc: BaseException) -> typ.NoReturn:
    print(f"error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


def _fail_restore(exc: ManifestRestoreError) -> typ.NoReturn:
    """Report a manifest restore failure, and the packing error behind it."""
    print(f"error: manifest restore failed: {exc}", file=sys.stderr)
    if exc.__context__ is not None:
        print(f"error: packing also failed: {exc.__context__}", file=sys.stderr)
    raise SystemExit(1) from exc


@app.default
def main(
    *,
    local_gui: bool = False,
    pack: bool = False,
    build_root: typ.Annotated[Path | None, Parameter(env_var="GUI_BUILD_ROOT")] = None,
    config_file: Path | None = None,
) -> None:
    """Stage GUI assets and optionally pack the plugin.

    Parameters
    ----------
    local_gui:
        Copy the GUI from the sibling ``mayara-gui`` checkout instead of the
        installed dependency.
    pack:
        After staging, run the archiving command with ``public/`` included.
    build_root:
        Plugin checkout to stage into. Defaults to the working directory.
    config_file:
        Optional TOML file overriding the default layout.
    """
    print("=== MaYaRa SignalK Plugin Build ===\n")
    try:
        layout = load_layout(build_root or Path.cwd(), config_file)
    except (FileNotFoundError, StageError) as exc:
        _fail(exc)

    if should_skip_staging(layout.staging_dir, local=local_gui, pack=pack):
        print(
            f"GUI assets already present in {layout.public_dir}/, skipping copy "
            "(pass --local-gui or --pack to rebuild)."
        )
        return

    print("Setting up GUI assets...\n")
    source = resolve_source(layout, local=local_gui)
    print(f"Copying GUI from {source.describe()}...\n")
    try:
        result = stage_assets(source, layout)
    except StageError as exc:
        _fail(exc)
    if source.kind is SourceKind.LOCAL:
        print(
            f"Copied {result.file_count} files from {source.describe()}/ "
            f"to {layout.public_dir}/\n"
        )
    else:
        print(f"Copied {result.file_count} GUI files to {layout.public_dir}/\n")

    if pack:
        try:
            pack_plugin(layout)
        except ManifestRestoreError as exc:
            _fail_restore(exc)
        except (ManifestError, ProcessExecutionError, CommandNotFound) as exc:
            _fail(exc)

    print("=== Build complete ===")


if __name__ == "__main__":
    app()
