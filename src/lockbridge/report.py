"""Conversion report aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def aggregate(direction: str, converted: list[str], skipped: list[str]) -> dict[str, Any]:
    """Summarise one conversion run.

    ``converted`` and ``skipped`` are ``name@version`` labels; skipped
    packages had no counterpart in the source lockfile (bundled).
    """
    return {
        "direction": direction,
        "converted": sorted(converted),
        "skipped": sorted(skipped),
        "totals": {
            "converted": len(converted),
            "skipped": len(skipped),
        },
    }


@dataclass(frozen=True)
class ConversionResult:
    """Serialised lockfile text plus the report describing how it was built."""

    content: str
    report: dict[str, Any]

    @property
    def skipped(self) -> list[str]:
        return list(self.report.get("skipped", []))
