"""Records loaded from either lock format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias
from collections.abc import Mapping


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(k): str(v) for k, v in value.items()}


@dataclass(frozen=True)
class FlatLockEntry:
    """One resolved record of the flat (yarn.lock) format."""

    version: str
    resolved: str | None = None
    integrity: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlatLockEntry:
        version = data.get("version")
        if version is None:
            raise ValueError("yarn.lock entry is missing 'version'")
        resolved = data.get("resolved")
        integrity = data.get("integrity")
        return cls(
            version=str(version),
            resolved=str(resolved) if resolved is not None else None,
            integrity=str(integrity) if integrity is not None else None,
            dependencies=_string_map(data.get("dependencies")),
            optional_dependencies=_string_map(data.get("optionalDependencies")),
        )


@dataclass(frozen=True)
class NestedLockEntry:
    """One install-path record of the nested (package-lock.json) format."""

    path: str
    name: str
    version: str
    resolved: str | None = None
    integrity: str | None = None
    bundled: bool = False


# Lock key ("a@^1.0.0, a@^1.2.0") -> record
FlatLockTable: TypeAlias = Mapping[str, FlatLockEntry]
# Install path ("node_modules/a/node_modules/b") -> record
NestedIndex: TypeAlias = Mapping[str, NestedLockEntry]
