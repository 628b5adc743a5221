"""Shared helpers for the GUI staging test suites."""

from __future__ import annotations

import json
import sys
from pathlib import Path

__all__ = [
    "DESCRIPTOR",
    "IGNORE_RULES",
    "archiver",
    "snapshot_tree",
    "write_file",
    "write_gui_bundle",
    "write_plugin_manifests",
]

IGNORE_RULES = "node_modules/\npublic/\n*.tgz\n"
DESCRIPTOR = {
    "name": "mayara-server-signalk-plugin",
    "version": "1.0.0",
    "files": ["index.js", "plugin/"],
    "dependencies": {"@marineyachtradar/mayara-gui": "^1.0.0"},
}


def write_file(path: Path, content: bytes | str = b"data") -> None:
    """Create ``path`` with ``content``, ensuring parent directories exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        path.write_text(content, encoding="utf-8")
    else:
        path.write_bytes(content)


def write_gui_bundle(root: Path) -> None:
    """Populate ``root`` with a GUI bundle mixing wanted and unwanted entries.

    Parameters
    ----------
    root : Path
        Directory that should look like an installed ``mayara-gui`` package.
    """
    write_file(root / "index.html", "<html></html>")
    write_file(root / "app.js", "console.log('radar')")
    write_file(root / "style.css", "body {}")
    write_file(root / "favicon.ico", b"\x00\x00\x01\x00")
    write_file(root / "readme.md", "# mayara-gui")
    write_file(root / "package.json", '{"name": "@marineyachtradar/mayara-gui"}')
    write_file(root / "assets" / "logo.svg", "<svg/>")
    write_file(root / "assets" / "fonts" / "radar.woff2", b"font")
    write_file(root / "proto" / "RadarMessage.proto", 'syntax = "proto3";')
    write_file(root / "node_modules" / "dep" / "index.js", "module.exports = {}")
    write_file(root / "src" / "main.js", "import './app.js'")


def write_plugin_manifests(root: Path) -> None:
    """Write the plugin's ``.npmignore`` and ``package.json`` into ``root``."""
    (root / ".npmignore").write_text(IGNORE_RULES, encoding="utf-8")
    (root / "package.json").write_text(
        json.dumps(DESCRIPTOR, indent=2) + "\n", encoding="utf-8"
    )


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Return the files beneath ``root`` keyed by POSIX relative path."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def archiver(script: str) -> tuple[str, ...]:
    """Return an archiving command that runs ``script`` with this interpreter."""
    return (sys.executable, "-c", script)
