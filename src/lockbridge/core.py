"""Core conversion entrypoints.

This module performs no process-level handling (argument parsing, exit
codes, writing the destination file) so it can be used by the CLI or
embedded in other tooling.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .discovery import read_root, walk_node_modules
from .errors import LockfileParseError
from .models import FlatLockEntry
from .parsers import package_lock, yarn_lock
from .report import ConversionResult, aggregate
from .settings import Settings, load_settings
from .translate import assemble_flat, assemble_nested, build_lock_table
from .translate.tree_to_flat import collect_descriptors
from .writers import package_lock as package_lock_writer
from .writers import yarn_lock as yarn_lock_writer

logger = logging.getLogger(__name__)

YARN_LOCK = "yarn.lock"
PACKAGE_LOCK = "package-lock.json"


def _flat_table(raw: dict[str, dict]) -> dict[str, FlatLockEntry]:
    table: dict[str, FlatLockEntry] = {}
    for key, record in raw.items():
        try:
            table[key] = FlatLockEntry.from_dict(record)
        except ValueError as exc:
            raise LockfileParseError(f"yarn.lock entry {key!r}: {exc}") from exc
    return table


def yarn_to_npm(root: Path, settings: Settings | None = None) -> ConversionResult:
    """Convert ``root/yarn.lock`` into package-lock.json text.

    Params:
        root: project directory holding package.json, yarn.lock and an
            installed node_modules tree
        settings: optional settings; loaded from the environment when None

    Returns: the lockfileVersion 1 document and a conversion report
    """
    settings = settings or load_settings()
    root = root.resolve()

    manifest = read_root(root)
    flat_table = _flat_table(yarn_lock.parse(root / YARN_LOCK))
    nodes = walk_node_modules(root)

    records = assemble_nested(nodes, flat_table, settings.vcs)
    document = package_lock_writer.build(manifest.name, manifest.version, records)

    converted = [str(node.identity) for node in nodes if node.path in records]
    skipped = [str(node.identity) for node in nodes if node.path not in records]
    report = aggregate("yarn-to-npm", converted, skipped)
    logger.info(
        "Converted %d packages from %s (%d bundled, skipped)",
        len(converted),
        YARN_LOCK,
        len(skipped),
    )
    return ConversionResult(package_lock_writer.dumps(document, settings.indent), report)


def npm_to_yarn(root: Path, settings: Settings | None = None) -> ConversionResult:
    """Convert ``root/package-lock.json`` into yarn.lock text.

    Params:
        root: project directory holding package.json, package-lock.json and
            an installed node_modules tree
        settings: optional settings; loaded from the environment when None

    Returns: the yarn.lock v1 text and a conversion report
    """
    settings = settings or load_settings()
    root = root.resolve()

    manifest = read_root(root)
    nested_index = package_lock.flatten(package_lock.load(root / PACKAGE_LOCK))
    nodes = walk_node_modules(root)

    accumulator = assemble_flat(nodes, nested_index, settings.vcs)
    table = build_lock_table(accumulator, collect_descriptors(manifest, nodes))

    converted = sorted({str(identity) for identity in accumulator})
    skipped = sorted({str(node.identity) for node in nodes if node.identity not in accumulator})
    report = aggregate("npm-to-yarn", converted, skipped)
    logger.info(
        "Converted %d packages from %s (%d bundled, skipped)",
        len(converted),
        PACKAGE_LOCK,
        len(skipped),
    )
    return ConversionResult(yarn_lock_writer.dumps(table), report)
