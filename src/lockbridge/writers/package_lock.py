"""Assemble and serialise an npm lockfileVersion 1 package-lock.json."""

from __future__ import annotations

import json
import logging
from typing import Any
from collections.abc import Mapping

from ..models.tree_node import NODE_MODULES

logger = logging.getLogger(__name__)

LOCKFILE_VERSION = 1


def _segments(path: str) -> list[str]:
    """Split ``node_modules/a/node_modules/@s/b`` into ``["a", "@s/b"]``."""
    return [part.strip("/") for part in path.split(f"{NODE_MODULES}/") if part.strip("/")]


def nest(entries: Mapping[str, Mapping[str, Any]]) -> dict[str, Any]:
    """Turn per-install-path records into the v1 nested ``dependencies`` tree.

    A record whose parent path has no record (a skipped bundled dependency)
    is dropped along with it.
    """
    tree: dict[str, Any] = {}
    for path in sorted(entries, key=lambda p: (p.count(f"{NODE_MODULES}/"), p)):
        names = _segments(path)
        level = tree
        for ancestor in names[:-1]:
            parent = level.get(ancestor)
            if parent is None:
                logger.debug("Dropping %s: parent package was not converted", path)
                break
            level = parent.setdefault("dependencies", {})
        else:
            level[names[-1]] = dict(entries[path])
    return _sorted_tree(tree)


def _sorted_tree(tree: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for name in sorted(tree):
        record = tree[name]
        if "dependencies" in record:
            record["dependencies"] = _sorted_tree(record["dependencies"])
        result[name] = record
    return result


def build(name: str, version: str, entries: Mapping[str, Mapping[str, Any]]) -> dict[str, Any]:
    document: dict[str, Any] = {
        "name": name,
        "version": version,
        "lockfileVersion": LOCKFILE_VERSION,
        "requires": True,
    }
    dependencies = nest(entries)
    if dependencies:
        document["dependencies"] = dependencies
    return document


def dumps(document: Mapping[str, Any], indent: int = 2) -> str:
    return json.dumps(document, indent=indent) + "\n"
