"""Tests for packing the plugin with staged assets admitted."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest
from gui_staging import (
    BuildLayout,
    ManifestError,
    ManifestRestoreError,
    include_staged_assets,
    pack_plugin,
)
from gui_staging.packing import strip_ignore_entry, with_files_glob
from plumbum.commands import CommandNotFound, ProcessExecutionError
from stage_test_helpers import DESCRIPTOR, IGNORE_RULES, archiver

RECORD_MANIFESTS = "\n".join(
    [
        "import pathlib, shutil",
        "seen = pathlib.Path('seen')",
        "seen.mkdir()",
        "shutil.copy('package.json', seen / 'package.json')",
        "shutil.copy('.npmignore', seen / '.npmignore')",
        "pathlib.Path('mayara-server-signalk-plugin-1.0.0.tgz').write_bytes(b'tgz')",
    ]
)
FAIL = "import sys; sys.exit(3)"
BREAK_IGNORE_FILE = (
    "import os, pathlib; os.remove('.npmignore'); pathlib.Path('.npmignore').mkdir()"
)

PackLayoutFactory = typ.Callable[..., BuildLayout]


def _manifest_bytes(layout: BuildLayout) -> tuple[bytes, bytes]:
    return layout.ignore_path.read_bytes(), layout.descriptor_path.read_bytes()


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param(IGNORE_RULES.encode(), b"node_modules/\n*.tgz\n", id="middle-line"),
        pytest.param(b"public/", b"", id="last-line-without-newline"),
        pytest.param(b"a\r\npublic/\r\nb\r\n", b"a\r\nb\r\n", id="crlf"),
        pytest.param(b"public/\npublic/ \n", b"", id="repeated"),
        pytest.param(b"public\n/public/x\n", b"public\n/public/x\n", id="no-match"),
        pytest.param(b"# caf\xe9\npublic/\n", b"# caf\xe9\n", id="latin-1-comment"),
    ],
)
def test_strip_ignore_entry(text: bytes, expected: bytes) -> None:
    """Only whole ``public/`` lines are removed."""
    assert strip_ignore_entry(text, "public") == expected


def test_with_files_glob_appends_once() -> None:
    """The glob is appended without mutating the original descriptor."""
    original = {"files": ["index.js"]}

    updated = with_files_glob(original, "public/**/*")
    again = with_files_glob(updated, "public/**/*")

    assert updated["files"] == ["index.js", "public/**/*"]
    assert again["files"] == ["index.js", "public/**/*"], "glob must not repeat"
    assert original == {"files": ["index.js"]}, "input descriptor must be untouched"


def test_include_staged_assets_mutates_then_restores(layout: BuildLayout) -> None:
    """Manifests admit ``public/`` inside the block and revert afterwards."""
    before = _manifest_bytes(layout)

    with include_staged_assets(layout) as result:
        ignore_text = layout.ignore_path.read_text(encoding="utf-8")
        descriptor = json.loads(layout.descriptor_path.read_text(encoding="utf-8"))
        assert "public/" not in ignore_text.splitlines()
        assert descriptor["files"] == [*DESCRIPTOR["files"], "public/**/*"]
        assert result.ignore_entry_removed is True
        assert result.files_glob_added is True

    assert _manifest_bytes(layout) == before, "manifests must be restored exactly"


def test_include_staged_assets_restores_when_block_raises(layout: BuildLayout) -> None:
    """An exception inside the block still restores and then propagates."""
    before = _manifest_bytes(layout)

    with pytest.raises(RuntimeError, match="boom"):
        with include_staged_assets(layout):
            raise RuntimeError("boom")

    assert _manifest_bytes(layout) == before


def test_pack_plugin_success_sees_mutated_manifests(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """The archiver runs in the build root against the mutated manifests."""
    packing_layout = pack_layout(*archiver(RECORD_MANIFESTS))
    before = _manifest_bytes(layout)

    result = pack_plugin(packing_layout)

    seen = layout.root / "seen"
    seen_descriptor = json.loads((seen / "package.json").read_text(encoding="utf-8"))
    assert "public/**/*" in seen_descriptor["files"], "archiver must see the glob"
    assert (seen / ".npmignore").read_text(encoding="utf-8") == "node_modules/\n*.tgz\n"
    assert (layout.root / "mayara-server-signalk-plugin-1.0.0.tgz").exists()
    assert result.command == packing_layout.pack_command
    assert _manifest_bytes(layout) == before, "manifests must be restored after packing"


@pytest.mark.parametrize(
    ("command", "expected_error"),
    [
        pytest.param(archiver(FAIL), ProcessExecutionError, id="non-zero-exit"),
        pytest.param(
            ("mayara-archiver-that-does-not-exist",),
            CommandNotFound,
            id="missing-executable",
        ),
    ],
)
def test_pack_plugin_failure_restores_manifests(
    layout: BuildLayout,
    pack_layout: PackLayoutFactory,
    command: tuple[str, ...],
    expected_error: type[Exception],
) -> None:
    """Archiver failures propagate only after the manifests are restored."""
    before = _manifest_bytes(layout)

    with pytest.raises(expected_error):
        pack_plugin(pack_layout(*command))

    assert _manifest_bytes(layout) == before


def test_pack_plugin_preserves_exact_ignore_bytes(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """Unusual line endings and trailing whitespace survive the round trip."""
    original = b"# packed files\r\nnode_modules/\r\npublic/\r\n\r\n*.log  "
    layout.ignore_path.write_bytes(original)

    with pytest.raises(ProcessExecutionError):
        pack_plugin(pack_layout(*archiver(FAIL)))

    assert layout.ignore_path.read_bytes() == original


def test_pack_plugin_handles_non_utf8_ignore_file(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """Ignore files in other encodings are stripped and restored as bytes."""
    original = b"# caf\xe9 assets\nnode_modules/\npublic/\n"
    layout.ignore_path.write_bytes(original)

    result = pack_plugin(pack_layout(*archiver(RECORD_MANIFESTS)))

    seen = (layout.root / "seen" / ".npmignore").read_bytes()
    assert seen == b"# caf\xe9 assets\nnode_modules/\n", (
        "archiver should see the ignore file without the public/ line"
    )
    assert result.ignore_entry_removed is True
    assert layout.ignore_path.read_bytes() == original


def test_descriptor_without_files_list_is_left_open(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """A descriptor that publishes everything is not narrowed to ``public/``."""
    descriptor = {"name": "plugin", "version": "1.0.0"}
    layout.descriptor_path.write_text(
        json.dumps(descriptor, indent=2) + "\n", encoding="utf-8"
    )

    result = pack_plugin(pack_layout(*archiver(RECORD_MANIFESTS)))

    seen = json.loads((layout.root / "seen" / "package.json").read_text(encoding="utf-8"))
    assert "files" not in seen
    assert result.files_glob_added is False
    restored = json.loads(layout.descriptor_path.read_text(encoding="utf-8"))
    assert restored == descriptor


def test_missing_ignore_file_is_not_created(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """Packing without ``.npmignore`` leaves it absent."""
    layout.ignore_path.unlink()

    result = pack_plugin(pack_layout(*archiver("pass")))

    assert result.ignore_entry_removed is False
    assert not layout.ignore_path.exists()


def test_malformed_descriptor_is_fatal_and_untouched(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """Invalid JSON stops packing before any manifest is rewritten."""
    layout.descriptor_path.write_text("{not json", encoding="utf-8")
    before = _manifest_bytes(layout)

    with pytest.raises(ManifestError, match="Invalid JSON"):
        pack_plugin(pack_layout(*archiver(RECORD_MANIFESTS)))

    assert _manifest_bytes(layout) == before
    assert not (layout.root / "seen").exists(), "archiver must not run"


def test_restore_failure_is_reported_distinctly(
    layout: BuildLayout, pack_layout: PackLayoutFactory
) -> None:
    """A manifest that cannot be rewritten raises :class:`ManifestRestoreError`."""
    original_descriptor = layout.descriptor_path.read_bytes()

    with pytest.raises(ManifestRestoreError, match=r"\.npmignore"):
        pack_plugin(pack_layout(*archiver(BREAK_IGNORE_FILE)))

    assert layout.descriptor_path.read_bytes() == original_descriptor, (
        "descriptor should still be restored when the ignore file fails"
    )
