"""Build yarn.lock records from package-lock.json and the installed tree."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Iterable, Iterator

from ..discovery import resolve_install_path
from ..errors import UnsupportedFormatError
from ..models import NestedIndex, NestedTreeNode, PackageIdentity
from ..settings import VcsHostConfig
from .codec import classify_location, to_flat
from .locator import find_in_nested_source

logger = logging.getLogger(__name__)


class FlatRecordAccumulator:
    """Per-(name, version) yarn.lock records merged across repeated tree visits.

    ``merge`` overrides individual fields of one identity's record and never
    touches the records of other versions of the same package.
    """

    def __init__(self) -> None:
        self._records: dict[PackageIdentity, dict[str, Any]] = {}

    def merge(self, identity: PackageIdentity, fields: dict[str, Any]) -> None:
        existing = self._records.get(identity, {})
        self._records[identity] = {**existing, **fields}

    def get(self, identity: PackageIdentity) -> dict[str, Any] | None:
        record = self._records.get(identity)
        return dict(record) if record is not None else None

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PackageIdentity]:
        return iter(self._records)


def flat_fields(
    node: NestedTreeNode,
    nested_index: NestedIndex,
    vcs: VcsHostConfig,
) -> dict[str, Any] | None:
    """Return the yarn.lock fields for one installed node, or None when bundled."""
    entry = find_in_nested_source(node.identity, nested_index, path=node.path)
    if entry is None:
        logger.debug("No package-lock entry for %s; assuming bundled", node.identity)
        return None

    location = entry.resolved or entry.version
    try:
        source = classify_location(location, vcs)
        resolved = to_flat(location, entry.integrity, vcs)
    except UnsupportedFormatError as exc:
        raise exc.for_package(node.name, node.version) from exc

    fields: dict[str, Any] = {"version": node.version, "resolved": resolved}
    if entry.integrity and not source.is_vcs:
        fields["integrity"] = entry.integrity
    if node.dependencies:
        fields["dependencies"] = dict(node.dependencies)
    if node.optional_dependencies:
        fields["optionalDependencies"] = dict(node.optional_dependencies)
    return fields


def assemble_flat(
    nodes: Iterable[NestedTreeNode],
    nested_index: NestedIndex,
    vcs: VcsHostConfig,
) -> FlatRecordAccumulator:
    accumulator = FlatRecordAccumulator()
    for node in nodes:
        fields = flat_fields(node, nested_index, vcs)
        if fields is not None:
            accumulator.merge(node.identity, fields)
    return accumulator


def collect_descriptors(
    root: NestedTreeNode,
    nodes: Iterable[NestedTreeNode],
) -> dict[PackageIdentity, set[str]]:
    """Attribute every declared ``name@range`` to the version Node would load for it.

    When two dependents declare the same descriptor but load different
    versions, the first attribution is kept; yarn.lock cannot express both.
    """
    nodes = list(nodes)
    by_path = {node.path: node for node in nodes}
    owners: dict[str, PackageIdentity] = {}
    descriptors: dict[PackageIdentity, set[str]] = {}

    for dependent in [root, *nodes]:
        for name, range_ in dependent.declared_ranges().items():
            install_path = resolve_install_path(dependent.path, name, by_path)
            if install_path is None:
                continue
            identity = by_path[install_path].identity
            descriptor = f"{name}@{range_}"
            owner = owners.setdefault(descriptor, identity)
            if owner != identity:
                logger.warning(
                    "%s resolves to both %s and %s; keeping %s",
                    descriptor,
                    owner,
                    identity,
                    owner,
                )
                continue
            descriptors.setdefault(identity, set()).add(descriptor)
    return descriptors


def build_lock_table(
    accumulator: FlatRecordAccumulator,
    descriptors: dict[PackageIdentity, set[str]],
) -> dict[str, dict[str, Any]]:
    """Key each accumulated record by its comma-joined, sorted descriptor list."""
    table: dict[str, dict[str, Any]] = {}
    for identity in accumulator:
        names = descriptors.get(identity) or {f"{identity.name}@{identity.version}"}
        table[", ".join(sorted(names))] = accumulator.get(identity) or {}
    return table
