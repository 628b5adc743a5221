"""Choose where the GUI bundle is staged from."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from .config import BuildLayout

__all__ = ["SourceKind", "SourceLocation", "resolve_source"]


class SourceKind(enum.StrEnum):
    """Origin of the GUI bundle."""

    DEPENDENCY = "dependency"
    LOCAL = "local"


@dataclasses.dataclass(slots=True, frozen=True)
class SourceLocation:
    """GUI bundle directory together with the mode that selected it."""

    kind: SourceKind
    path: Path
    label: str

    def describe(self) -> str:
        """Return a short human-readable origin (e.g. ``"local ../mayara-gui"``)."""
        if self.kind is SourceKind.LOCAL:
            return f"local {self.label}"
        return self.label


def resolve_source(layout: "BuildLayout", *, local: bool) -> SourceLocation:
    """Return the GUI bundle location for the requested mode.

    The path is not checked here; :func:`gui_staging.staging.stage_assets`
    reports a missing source.

    Examples
    --------
    >>> from gui_staging.config import BuildLayout
    >>> layout = BuildLayout(root=Path("/plugin"))
    >>> resolve_source(layout, local=True).path.as_posix()
    '/plugin/../mayara-gui'
    >>> resolve_source(layout, local=False).kind
    <SourceKind.DEPENDENCY: 'dependency'>
    """

    if local:
        return SourceLocation(SourceKind.LOCAL, layout.local_source, layout.local_dir)
    return SourceLocation(
        SourceKind.DEPENDENCY,
        layout.dependency_source,
        f"{layout.dependency_dir}/{layout.package}",
    )
