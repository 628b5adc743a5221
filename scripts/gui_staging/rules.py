"""Whitelist rules deciding which GUI bundle entries are staged.

Rules are evaluated against the immediate children of the GUI bundle only.
A directory that passes is copied in full; nothing below it is filtered.

Examples
--------
>>> rules = InclusionFilter.default()
>>> rules.accepts_name("index.html", is_dir=False)
True
>>> rules.accepts_name("node_modules", is_dir=True)
False
"""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

__all__ = [
    "DEFAULT_DIRECTORIES",
    "DEFAULT_EXTENSIONS",
    "DirectoryNameRule",
    "ExtensionRule",
    "InclusionFilter",
    "InclusionRule",
]

DEFAULT_EXTENSIONS: tuple[str, ...] = (".html", ".js", ".css", ".ico", ".svg")
DEFAULT_DIRECTORIES: tuple[str, ...] = ("assets", "proto", "protobuf")


@dataclasses.dataclass(slots=True, frozen=True)
class ExtensionRule:
    """Accept files whose name ends with :attr:`ext` (for example ``".js"``)."""

    ext: str

    def matches(self, name: str, *, is_dir: bool) -> bool:
        return not is_dir and name.endswith(self.ext)


@dataclasses.dataclass(slots=True, frozen=True)
class DirectoryNameRule:
    """Accept directories named exactly :attr:`name`."""

    name: str

    def matches(self, name: str, *, is_dir: bool) -> bool:
        return is_dir and name == self.name


InclusionRule = ExtensionRule | DirectoryNameRule


@dataclasses.dataclass(slots=True, frozen=True)
class InclusionFilter:
    """Ordered collection of :data:`InclusionRule` values.

    Parameters
    ----------
    rules : tuple[InclusionRule, ...]
        Rules evaluated in order; the first match admits the entry.
    """

    rules: tuple[InclusionRule, ...]

    @classmethod
    def default(cls) -> InclusionFilter:
        """Return the filter for the stock GUI bundle layout."""
        return cls.from_names(DEFAULT_EXTENSIONS, DEFAULT_DIRECTORIES)

    @classmethod
    def from_names(
        cls, extensions: typ.Iterable[str], directories: typ.Iterable[str]
    ) -> InclusionFilter:
        """Build a filter from plain extension and directory name lists."""
        rules: list[InclusionRule] = [ExtensionRule(ext) for ext in extensions]
        rules.extend(DirectoryNameRule(name) for name in directories)
        return cls(tuple(rules))

    def accepts_name(self, name: str, *, is_dir: bool) -> bool:
        """Return ``True`` when any rule admits an entry called ``name``."""
        return any(rule.matches(name, is_dir=is_dir) for rule in self.rules)

    def accepts(self, entry: Path) -> bool:
        """Return ``True`` when ``entry`` should be staged."""
        return self.accepts_name(entry.name, is_dir=entry.is_dir())

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(rule.ext for rule in self.rules if isinstance(rule, ExtensionRule))

    @property
    def directories(self) -> tuple[str, ...]:
        return tuple(
            rule.name for rule in self.rules if isinstance(rule, DirectoryNameRule)
        )
