"""Source location and verification models shared by both lock formats."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SourceKind(Enum):
    """Where a package's contents come from."""

    REGISTRY = "registry"
    VCS_TARBALL = "vcs-tarball"
    GIT_URL = "git-url"


@dataclass(frozen=True)
class ClassifiedSource:
    """Result of classifying a source location once, up front.

    For ``REGISTRY`` sources ``location`` is the URL without its fragment and
    ``fragment`` is whatever followed ``#``. For ``VCS_TARBALL`` sources
    ``repository`` is ``owner/repo`` and ``fragment`` is the commit or ref.
    ``GIT_URL`` sources keep the whole URL, commit or tag fragment included.
    """

    kind: SourceKind
    location: str
    fragment: str | None = None
    repository: str | None = None

    @property
    def is_vcs(self) -> bool:
        return self.kind is SourceKind.VCS_TARBALL


@dataclass(frozen=True)
class ResolvedReference:
    """Format-neutral description of where a package came from and how to verify it."""

    version: str
    source_location: str | None = None
    verification: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"version": self.version}
        if self.source_location is not None:
            data["resolved"] = self.source_location
        if self.verification is not None:
            data["integrity"] = self.verification
        return data
