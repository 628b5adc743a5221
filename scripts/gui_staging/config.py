"""Build layout model and loader for the GUI staging helper.

The layout bundles every path and name the staging pipeline touches. Values
default to the plugin's stock layout and can be overridden through the
``[gui]`` table of a TOML file.

Usage
-----
Load the layout for the current plugin checkout::

    from pathlib import Path
    from gui_staging.config import load_layout

    layout = load_layout(Path.cwd())
    print(f"Staging into: {layout.staging_dir}")

An override file looks like::

    [gui]
    local_dir = "../mayara-gui-dev"
    extensions = [".html", ".js", ".css", ".ico", ".svg", ".wasm"]
"""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

import tomllib

from .errors import StageError
from .rules import DEFAULT_DIRECTORIES, DEFAULT_EXTENSIONS, InclusionFilter

__all__ = ["CONFIG_FILE_NAME", "BuildLayout", "load_layout"]

CONFIG_FILE_NAME = "gui-staging.toml"

_STRING_KEYS = frozenset(
    {
        "public_dir",
        "package",
        "dependency_dir",
        "local_dir",
        "ignore_file",
        "descriptor_file",
    }
)
_LIST_KEYS = frozenset({"pack_command", "extensions", "directories"})


@dataclasses.dataclass(slots=True, frozen=True)
class BuildLayout:
    """Concrete layout produced by :func:`load_layout`.

    Parameters
    ----------
    root : Path
        Plugin checkout containing the manifests and the staging directory.
    public_dir : str, default="public"
        Staging directory name relative to :attr:`root`.
    package : str, default="@marineyachtradar/mayara-gui"
        Name of the GUI package installed as a dependency.
    dependency_dir : str, default="node_modules"
        Dependency cache directory relative to :attr:`root`.
    local_dir : str, default="../mayara-gui"
        Sibling GUI checkout relative to :attr:`root`.
    ignore_file : str, default=".npmignore"
        Ignore-rules file consulted by the archiving tool.
    descriptor_file : str, default="package.json"
        Package descriptor holding the ``files`` inclusion list.
    pack_command : tuple[str, ...], default=("npm", "pack")
        Archiving command run from :attr:`root`.
    rules : InclusionFilter
        Whitelist applied to the top level of the GUI bundle.

    Examples
    --------
    >>> layout = BuildLayout(root=Path("/plugin"))
    >>> layout.staging_dir.as_posix()
    '/plugin/public'
    >>> layout.dependency_source.as_posix()
    '/plugin/node_modules/@marineyachtradar/mayara-gui'
    """

    root: Path
    public_dir: str = "public"
    package: str = "@marineyachtradar/mayara-gui"
    dependency_dir: str = "node_modules"
    local_dir: str = "../mayara-gui"
    ignore_file: str = ".npmignore"
    descriptor_file: str = "package.json"
    pack_command: tuple[str, ...] = ("npm", "pack")
    rules: InclusionFilter = dataclasses.field(default_factory=InclusionFilter.default)

    @property
    def staging_dir(self) -> Path:
        """Absolute path of the staging directory."""
        return self.root / self.public_dir

    @property
    def dependency_source(self) -> Path:
        """Location of the GUI bundle inside the dependency cache."""
        return self.root / self.dependency_dir / Path(*self.package.split("/"))

    @property
    def local_source(self) -> Path:
        """Location of the sibling GUI checkout."""
        return self.root / self.local_dir

    @property
    def ignore_path(self) -> Path:
        return self.root / self.ignore_file

    @property
    def descriptor_path(self) -> Path:
        return self.root / self.descriptor_file

    @property
    def files_glob(self) -> str:
        """Descriptor ``files`` entry that includes every staged asset."""
        return f"{self.public_dir}/**/*"


def load_layout(build_root: Path, config_file: Path | None = None) -> BuildLayout:
    """Return the :class:`BuildLayout` for ``build_root``.

    Parameters
    ----------
    build_root : Path
        Plugin checkout to stage into.
    config_file : Path | None, optional
        Explicit TOML file with a ``[gui]`` table. When omitted,
        ``gui-staging.toml`` beneath ``build_root`` is used if present.

    Returns
    -------
    BuildLayout
        Layout with defaults replaced by any configured values.

    Raises
    ------
    FileNotFoundError
        Raised when an explicit ``config_file`` does not exist.
    StageError
        Raised when the ``[gui]`` table holds unknown keys or values of the
        wrong type, or when ``public_dir`` does not resolve strictly below
        ``build_root``.
    """
    root = Path(build_root).resolve()
    if config_file is not None:
        config_path = Path(config_file)
        if not config_path.is_file():
            message = f"Configuration file not found at {config_path}"
            raise FileNotFoundError(message)
    else:
        config_path = root / CONFIG_FILE_NAME
        if not config_path.is_file():
            return BuildLayout(root=root)

    section = _extract_section(_load_toml(config_path), config_path)
    _reject_unknown_keys(section, config_path)
    overrides: dict[str, typ.Any] = {
        key: _require_string(section[key], key, config_path)
        for key in _STRING_KEYS
        if key in section
    }
    if "pack_command" in section:
        command = _require_strings(section["pack_command"], "pack_command", config_path)
        if not command:
            message = f"'pack_command' must not be empty in {config_path}"
            raise StageError(message)
        overrides["pack_command"] = tuple(command)

    extensions = section.get("extensions", list(DEFAULT_EXTENSIONS))
    directories = section.get("directories", list(DEFAULT_DIRECTORIES))
    overrides["rules"] = InclusionFilter.from_names(
        _require_strings(extensions, "extensions", config_path),
        _require_strings(directories, "directories", config_path),
    )
    layout = BuildLayout(root=root, **overrides)
    _require_staging_below_root(layout, config_path)
    return layout


def _require_staging_below_root(layout: BuildLayout, config_path: Path) -> None:
    """Ensure staging cannot clear the checkout or anything outside it."""
    target = layout.staging_dir.resolve()
    if target == layout.root or not target.is_relative_to(layout.root):
        message = (
            f"'public_dir' must name a directory below {layout.root} "
            f"(got {layout.public_dir!r} in {config_path})"
        )
        raise StageError(message)


def _load_toml(path: Path) -> dict[str, typ.Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _extract_section(data: dict[str, typ.Any], config_path: Path) -> dict[str, typ.Any]:
    section = data.get("gui", {})
    if not isinstance(section, dict):
        message = f"[gui] must be a table in {config_path}"
        raise StageError(message)
    return section


def _reject_unknown_keys(section: dict[str, typ.Any], config_path: Path) -> None:
    """Ensure ``section`` only holds recognised keys.

    Examples
    --------
    >>> _reject_unknown_keys({"public_dir": "www"}, Path("cfg"))
    >>> _reject_unknown_keys({"colour": "red"}, Path("cfg"))
    Traceback (most recent call last):
    ...
    gui_staging.errors.StageError: Unknown key(s) colour in [gui] section of cfg
    """
    if unknown := sorted(set(section) - _STRING_KEYS - _LIST_KEYS):
        joined = ", ".join(unknown)
        message = f"Unknown key(s) {joined} in [gui] section of {config_path}"
        raise StageError(message)


def _require_string(value: object, key: str, config_path: Path) -> str:
    if not isinstance(value, str) or not value:
        message = f"'{key}' must be a non-empty string in {config_path}"
        raise StageError(message)
    return value


def _require_strings(value: object, key: str, config_path: Path) -> list[str]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) and item for item in value
    ):
        message = f"'{key}' must be a list of non-empty strings in {config_path}"
        raise StageError(message)
    return list(value)
