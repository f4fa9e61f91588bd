"""Installed-tree node model."""

from __future__ import annotations

from dataclasses import dataclass, field

from .identity import PackageIdentity

NODE_MODULES = "node_modules"


@dataclass(frozen=True)
class NestedTreeNode:
    """One installed package, keyed by its path relative to the project root.

    ``path`` looks like ``node_modules/a/node_modules/@scope/b``; the project
    root itself has the empty path. ``dependencies`` and
    ``optional_dependencies`` hold the ranges declared in the package's own
    ``package.json``.
    """

    path: str
    name: str
    version: str
    dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def identity(self) -> PackageIdentity:
        return PackageIdentity(self.name, self.version)

    def declared_ranges(self) -> dict[str, str]:
        """Regular and optional dependencies together; optional entries win."""
        merged = dict(self.dependencies)
        merged.update(self.optional_dependencies)
        return merged
