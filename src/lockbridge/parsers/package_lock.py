"""Parse npm package-lock.json into a path-keyed index of resolved entries."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import LockfileParseError
from ..models import NestedLockEntry
from ..models.tree_node import NODE_MODULES
from ..validators.package_lock_schema import validate_package_lock

logger = logging.getLogger(__name__)


def name_from_path(path: str) -> str:
    """Derive a package name from an install path, keeping ``@scope/`` prefixes."""
    return path.rsplit(f"{NODE_MODULES}/", 1)[-1]


def load(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise LockfileParseError(f"Failed to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LockfileParseError(f"Invalid JSON in {path}: {exc}") from exc
    validate_package_lock(data, source=str(path))
    return data


def _entry(path: str, meta: dict[str, Any]) -> NestedLockEntry | None:
    version = meta.get("version")
    if not version:
        return None
    return NestedLockEntry(
        path=path,
        name=str(meta.get("name") or name_from_path(path)),
        version=str(version),
        resolved=meta.get("resolved"),
        integrity=meta.get("integrity"),
        bundled=bool(meta.get("bundled") or meta.get("inBundle")),
    )


def flatten(data: dict[str, Any]) -> dict[str, NestedLockEntry]:
    """Return install path -> entry for every package in the lockfile.

    Supports npm v2+ ("packages" map) and falls back to the v1
    ("dependencies" tree) layout.
    """
    index: dict[str, NestedLockEntry] = {}

    # npm v2+ format
    packages = data.get("packages")
    if isinstance(packages, dict) and packages:
        for key, meta in packages.items():
            if not key or not isinstance(meta, dict) or meta.get("link"):
                continue
            entry = _entry(key, meta)
            if entry is not None:
                index[key] = entry
        logger.debug("Indexed %d package-lock entries from \"packages\"", len(index))
        return index

    # npm v1 format
    def _walk(deps: dict[str, Any], prefix: str) -> None:
        for name, meta in deps.items():
            if not isinstance(meta, dict):
                continue
            path = f"{prefix}{NODE_MODULES}/{name}"
            entry = _entry(path, {**meta, "name": name})
            if entry is not None:
                index[path] = entry
            nested = meta.get("dependencies")
            if isinstance(nested, dict):
                _walk(nested, f"{path}/")

    deps = data.get("dependencies")
    if isinstance(deps, dict):
        _walk(deps, "")

    logger.debug("Indexed %d package-lock entries from \"dependencies\"", len(index))
    return index
