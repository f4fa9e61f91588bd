"""Build package-lock.json records from yarn.lock and the installed tree."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Iterable

from ..errors import UnsupportedFormatError
from ..models import FlatLockTable, NestedTreeNode, ResolvedReference
from ..settings import VcsHostConfig
from .codec import to_nested
from .locator import find_in_flat_table
from .requires import resolve_requires

logger = logging.getLogger(__name__)


def nested_record(
    node: NestedTreeNode,
    flat_table: FlatLockTable,
    vcs: VcsHostConfig,
) -> dict[str, Any] | None:
    """Return the package-lock record for one install path, or None when bundled."""
    entry = find_in_flat_table(node.name, node.version, flat_table)
    if entry is None:
        logger.debug("No yarn.lock entry for %s; assuming bundled", node.identity)
        return None

    if entry.resolved:
        try:
            reference = to_nested(node.version, entry.resolved, vcs, integrity=entry.integrity)
        except UnsupportedFormatError as exc:
            raise exc.for_package(node.name, node.version) from exc
    else:
        reference = ResolvedReference(node.version, verification=entry.integrity)

    record: dict[str, Any] = reference.to_dict()
    declared = node.declared_ranges()
    if declared:
        requires = resolve_requires(declared, flat_table)
        if requires:
            record["requires"] = requires
    return record


def assemble_nested(
    nodes: Iterable[NestedTreeNode],
    flat_table: FlatLockTable,
    vcs: VcsHostConfig,
) -> dict[str, dict[str, Any]]:
    """install path -> package-lock record, for every node with a yarn.lock counterpart."""
    records: dict[str, dict[str, Any]] = {}
    for node in nodes:
        record = nested_record(node, flat_table, vcs)
        if record is not None:
            records[node.path] = record
    return records
