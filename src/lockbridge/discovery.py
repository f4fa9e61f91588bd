"""Installed-tree discovery utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from collections.abc import Collection

from .models import NestedTreeNode
from .models.tree_node import NODE_MODULES
from .parsers.package_json import read as read_package_json
from .parsers.package_lock import name_from_path

logger = logging.getLogger(__name__)


def read_root(root: Path) -> NestedTreeNode:
    """Return the project's own manifest as the tree root (empty path).

    Dev dependencies count as regular dependencies of the root.
    """
    manifest = read_package_json(root / "package.json")
    dependencies = dict(manifest["dependencies"])
    dependencies.update(manifest["devDependencies"])
    return NestedTreeNode(
        path="",
        name=manifest["name"] or root.name,
        version=manifest["version"] or "0.0.0",
        dependencies=dependencies,
        optional_dependencies=manifest["optionalDependencies"],
    )


def walk_node_modules(root: Path) -> list[NestedTreeNode]:
    """Find every installed package under ``root/node_modules``, depth first.

    Scoped directories (``@scope/name``) and nested ``node_modules`` are
    followed; ``.bin`` and other dot directories are skipped, as are
    directories without a versioned ``package.json``.
    """
    root = root.resolve()
    nodes: list[NestedTreeNode] = []
    seen: set[Path] = set()

    def _visit(package_dir: Path, path: str) -> None:
        real = package_dir.resolve()
        if real in seen:
            return
        seen.add(real)

        manifest_path = package_dir / "package.json"
        if not manifest_path.is_file():
            logger.debug("Skipping %s: no package.json", path)
            return
        manifest = read_package_json(manifest_path)
        if not manifest["version"]:
            logger.debug("Skipping %s: package.json has no version", path)
            return

        nodes.append(
            NestedTreeNode(
                path=path,
                name=manifest["name"] or name_from_path(path),
                version=manifest["version"],
                dependencies=manifest["dependencies"],
                optional_dependencies=manifest["optionalDependencies"],
            )
        )
        _scan(package_dir / NODE_MODULES, f"{path}/")

    def _scan(directory: Path, prefix: str) -> None:
        if not directory.is_dir():
            return
        for child in sorted(directory.iterdir()):
            if child.name.startswith(".") or not child.is_dir():
                continue
            if child.name.startswith("@"):
                for scoped in sorted(child.iterdir()):
                    if scoped.is_dir() and not scoped.name.startswith("."):
                        _visit(scoped, f"{prefix}{NODE_MODULES}/{child.name}/{scoped.name}")
                continue
            _visit(child, f"{prefix}{NODE_MODULES}/{child.name}")

    _scan(root / NODE_MODULES, "")
    logger.debug("Found %d installed packages under %s", len(nodes), root)
    return nodes


def resolve_install_path(from_path: str, name: str, installed: Collection[str]) -> str | None:
    """Return the install path Node would load ``name`` from when required at ``from_path``.

    Looks in ``from_path``'s own ``node_modules`` first, then walks up through
    each enclosing ``node_modules`` to the project root.
    """
    base = from_path
    while True:
        candidate = f"{base}/{NODE_MODULES}/{name}" if base else f"{NODE_MODULES}/{name}"
        if candidate in installed:
            return candidate
        if not base:
            return None
        idx = base.rfind(f"/{NODE_MODULES}/")
        base = base[:idx] if idx != -1 else ""
