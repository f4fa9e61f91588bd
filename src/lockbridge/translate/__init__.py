"""Format-neutral translation between the nested and flat lock formats."""

from __future__ import annotations

from .codec import classify_location, classify_resolved, to_flat, to_nested
from .flat_to_tree import assemble_nested, nested_record
from .locator import (
    find_in_flat_table,
    find_in_nested_source,
    find_range_in_flat_table,
    parse_descriptor,
    split_lock_key,
)
from .requires import resolve_requires
from .tree_to_flat import FlatRecordAccumulator, assemble_flat, build_lock_table

__all__ = [
    "FlatRecordAccumulator",
    "assemble_flat",
    "assemble_nested",
    "build_lock_table",
    "classify_location",
    "classify_resolved",
    "find_in_flat_table",
    "find_in_nested_source",
    "find_range_in_flat_table",
    "nested_record",
    "parse_descriptor",
    "resolve_requires",
    "split_lock_key",
    "to_flat",
    "to_nested",
]
