"""Package identity model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageIdentity:
    """Identify one resolved package instance by name and exact version."""

    name: str
    version: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if not self.version:
            raise ValueError(f"Package {self.name} must have a version")

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
