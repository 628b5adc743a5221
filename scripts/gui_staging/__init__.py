"""Public interface for the GUI staging helper package."""

from .config import CONFIG_FILE_NAME, BuildLayout, load_layout
from .errors import ManifestError, ManifestRestoreError, StageError
from .packing import PackResult, include_staged_assets, pack_plugin
from .resolution import SourceKind, SourceLocation, resolve_source
from .rules import DirectoryNameRule, ExtensionRule, InclusionFilter
from .staging import StageResult, should_skip_staging, stage_assets

__all__ = [
    "BuildLayout",
    "CONFIG_FILE_NAME",
    "DirectoryNameRule",
    "ExtensionRule",
    "include_staged_assets",
    "InclusionFilter",
    "load_layout",
    "ManifestError",
    "ManifestRestoreError",
    "pack_plugin",
    "PackResult",
    "resolve_source",
    "should_skip_staging",
    "SourceKind",
    "SourceLocation",
    "stage_assets",
    "StageError",
    "StageResult",
]
