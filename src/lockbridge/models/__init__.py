"""Data models for lock translation."""

from __future__ import annotations

from .identity import PackageIdentity
from .lock_entry import FlatLockEntry, FlatLockTable, NestedLockEntry, NestedIndex
from .reference import ClassifiedSource, ResolvedReference, SourceKind
from .tree_node import NestedTreeNode

__all__ = [
    "ClassifiedSource",
    "FlatLockEntry",
    "FlatLockTable",
    "NestedIndex",
    "NestedLockEntry",
    "NestedTreeNode",
    "PackageIdentity",
    "ResolvedReference",
    "SourceKind",
]
