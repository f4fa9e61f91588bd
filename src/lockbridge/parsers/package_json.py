"""Parse package.json and extract the fields lock translation needs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import LockfileParseError


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(name): str(spec) for name, spec in value.items()}


def read(path: Path) -> dict[str, Any]:
    """Return ``name``, ``version``, ``dependencies``, ``devDependencies`` and
    ``optionalDependencies`` from a manifest; missing sections become empty maps.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise LockfileParseError(f"Failed to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LockfileParseError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise LockfileParseError(f"{path} must contain a JSON object")

    return {
        "name": str(data.get("name") or ""),
        "version": str(data.get("version") or ""),
        "dependencies": _string_map(data.get("dependencies")),
        "devDependencies": _string_map(data.get("devDependencies")),
        "optionalDependencies": _string_map(data.get("optionalDependencies")),
    }
