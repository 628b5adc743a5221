"""Shared fixtures for the GUI staging test suite."""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

import pytest
from gui_staging import BuildLayout
from stage_test_helpers import write_gui_bundle, write_plugin_manifests


@pytest.fixture
def plugin_root(tmp_path: Path) -> Path:
    """Create an isolated plugin checkout with its manifests."""
    root = tmp_path / "plugin"
    root.mkdir()
    write_plugin_manifests(root)
    return root


@pytest.fixture
def layout(plugin_root: Path) -> BuildLayout:
    """Return the stock layout rooted at ``plugin_root``."""
    return BuildLayout(root=plugin_root)


@pytest.fixture
def installed_gui(layout: BuildLayout) -> Path:
    """Populate the dependency cache with a GUI bundle."""
    write_gui_bundle(layout.dependency_source)
    return layout.dependency_source


@pytest.fixture
def local_gui(layout: BuildLayout) -> Path:
    """Populate the sibling ``mayara-gui`` checkout with a GUI bundle."""
    source = layout.local_source.resolve()
    write_gui_bundle(source)
    return source


@pytest.fixture
def pack_layout(layout: BuildLayout) -> typ.Callable[..., BuildLayout]:
    """Return a factory binding ``layout`` to a custom archiving command."""

    def _factory(*command: str) -> BuildLayout:
        return dataclasses.replace(layout, pack_command=tuple(command))

    return _factory
