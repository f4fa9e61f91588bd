"""Find the counterpart of a package identity in the other format's table.

A miss is never an error: it means the package is bundled inside its parent
and is not tracked separately by the other lockfile.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from ..models import FlatLockEntry, FlatLockTable, NestedIndex, NestedLockEntry, PackageIdentity
from ..parsers.semver import satisfies

logger = logging.getLogger(__name__)


def split_lock_key(key: str) -> list[str]:
    """``'a@^1.0.0, "a@^1.2.0"'`` -> ``["a@^1.0.0", "a@^1.2.0"]``"""
    return [part.strip().strip('"') for part in key.split(",") if part.strip()]


def parse_descriptor(descriptor: str) -> tuple[str, str]:
    """Split ``name@range`` into its parts; a leading ``@`` belongs to the scope."""
    at = descriptor.find("@", 1)
    if at == -1:
        return descriptor, ""
    return descriptor[:at], descriptor[at + 1 :]


@lru_cache(maxsize=65536)
def _descriptors(key: str) -> tuple[tuple[str, str], ...]:
    return tuple(parse_descriptor(d) for d in split_lock_key(key))


def _candidates(name: str, table: FlatLockTable) -> list[tuple[str, FlatLockEntry]]:
    return [
        (key, entry)
        for key, entry in table.items()
        if any(desc_name == name for desc_name, _ in _descriptors(key))
    ]


def find_in_flat_table(name: str, version: str, table: FlatLockTable) -> FlatLockEntry | None:
    """Return the yarn.lock record for ``name`` at ``version``.

    A record pinned to exactly ``version`` wins; otherwise the first record
    (in table order) with a descriptor range satisfied by ``version``.
    """
    candidates = _candidates(name, table)
    for _, entry in candidates:
        if entry.version == version:
            return entry

    for key, entry in candidates:
        for desc_name, desc_range in _descriptors(key):
            if desc_name == name and satisfies(version, desc_range):
                logger.warning(
                    "%s@%s has no exact yarn.lock entry; using %r, "
                    "whose resolved and integrity belong to %s",
                    name,
                    version,
                    key,
                    entry.version,
                )
                return entry
    return None


def find_range_in_flat_table(name: str, range_: str, table: FlatLockTable) -> FlatLockEntry | None:
    """Return the record Yarn would pick for the declaration ``name@range_``."""
    candidates = _candidates(name, table)
    for key, entry in candidates:
        if (name, range_) in _descriptors(key):
            return entry

    for _, entry in candidates:
        if satisfies(entry.version, range_):
            return entry
    return None


def find_in_nested_source(
    identity: PackageIdentity,
    index: NestedIndex,
    path: str | None = None,
) -> NestedLockEntry | None:
    """Return the first package-lock entry whose (name, version) equals ``identity``.

    Entries npm marks as bundled never count: they ship inside their parent.

    When ``path`` is given, the entry at that install path is preferred if it
    names the same package and either has the same version or records a
    non-semver source (``github:owner/repo#sha``) as its version.
    """
    if path is not None:
        hinted = index.get(path)
        if hinted is not None and not hinted.bundled and hinted.name == identity.name:
            if hinted.version == identity.version or ":" in hinted.version:
                return hinted
    for entry in index.values():
        if entry.bundled:
            continue
        if entry.name == identity.name and entry.version == identity.version:
            return entry
    return None
