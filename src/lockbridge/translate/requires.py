"""Resolve declared dependency ranges to the exact versions yarn.lock installs."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..models import FlatLockTable
from .locator import find_range_in_flat_table

logger = logging.getLogger(__name__)


def resolve_requires(declared: Mapping[str, str], table: FlatLockTable) -> dict[str, str]:
    """Map each ``name -> range`` in ``declared`` to an exact version.

    Names with no matching record are bundled and left out.
    """
    requires: dict[str, str] = {}
    for name, range_ in declared.items():
        entry = find_range_in_flat_table(name, range_, table)
        if entry is None:
            logger.debug("No yarn.lock entry satisfies %s@%s; assuming bundled", name, range_)
            continue
        requires[name] = entry.version
    return requires
