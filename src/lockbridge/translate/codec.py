"""Translate a package's source location and verification hash between formats.

yarn.lock keeps a legacy sha1 checksum as a ``#<hex>`` fragment on the
``resolved`` URL; package-lock.json keeps an SRI ``integrity`` string next
to a bare URL. Git tarballs from the VCS host become a self-describing
``<scheme>:<owner>/<repo>#<commit>`` version in package-lock.json and carry
no hash in either format. Other git URLs pass through whole; their
fragment is a commit or tag.
"""

from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import urlsplit

from ..errors import UnsupportedFormatError
from ..models import ClassifiedSource, ResolvedReference, SourceKind
from ..settings import VcsHostConfig

LEGACY_ALGORITHM = "sha1"
MODERN_ALGORITHM = "sha512"

_VCS_TARBALL_PATH = re.compile(r"^/([^/]+/[^/]+)/tar\.gz/([0-9a-f]+)$")
_HEX = re.compile(r"^(?:[0-9a-fA-F]{2})+$")
_GIT_PREFIXES = ("git+", "git:")


def _check_url(location: str) -> None:
    try:
        parts = urlsplit(location)
        # port parsing is lazy; touch it so a bad port fails here
        parts.port
    except ValueError as exc:
        raise UnsupportedFormatError(f"Malformed source location {location!r}: {exc}") from exc


def _is_git_url(location: str) -> bool:
    """``git+https://...``, ``git://...`` or any URL ending in ``.git`` before its fragment."""
    lowered = location.lower()
    return lowered.startswith(_GIT_PREFIXES) or lowered.partition("#")[0].endswith(".git")


def classify_resolved(resolved: str, vcs: VcsHostConfig) -> ClassifiedSource:
    """Classify a yarn.lock ``resolved`` URL."""
    if _is_git_url(resolved):
        return ClassifiedSource(SourceKind.GIT_URL, resolved)
    _check_url(resolved)
    parts = urlsplit(resolved)
    if (parts.hostname or "") == vcs.tarball_host:
        match = _VCS_TARBALL_PATH.match(parts.path)
        if match:
            return ClassifiedSource(
                SourceKind.VCS_TARBALL,
                resolved,
                fragment=match.group(2),
                repository=match.group(1),
            )
    location, sep, fragment = resolved.partition("#")
    return ClassifiedSource(SourceKind.REGISTRY, location, fragment=fragment if sep else None)


def classify_location(location: str, vcs: VcsHostConfig) -> ClassifiedSource:
    """Classify a package-lock ``resolved`` URL, or a bare version when there is none."""
    prefix = f"{vcs.scheme}:"
    if location.startswith(prefix):
        repository, _, ref = location[len(prefix):].partition("#")
        return ClassifiedSource(
            SourceKind.VCS_TARBALL,
            location,
            fragment=ref or None,
            repository=repository,
        )
    if _is_git_url(location):
        return ClassifiedSource(SourceKind.GIT_URL, location)
    _check_url(location)
    return ClassifiedSource(SourceKind.REGISTRY, location)


def checksum_to_integrity(hex_checksum: str) -> str:
    return f"{LEGACY_ALGORITHM}-" + base64.b64encode(bytes.fromhex(hex_checksum)).decode("ascii")


def integrity_to_checksum(integrity: str) -> str:
    """Return the hex digest for ``integrity``, preferring sha1 over sha512.

    Any other algorithm is rejected rather than re-encoded.
    """
    digests: dict[str, str] = {}
    for token in integrity.split():
        algorithm, sep, digest = token.partition("-")
        if not sep or not digest:
            raise UnsupportedFormatError(f"Unrecognised integrity value {token!r}")
        digests.setdefault(algorithm.lower(), digest.split("?", 1)[0])

    for algorithm in (LEGACY_ALGORITHM, MODERN_ALGORITHM):
        if algorithm in digests:
            try:
                raw = base64.b64decode(digests[algorithm], validate=True)
            except (binascii.Error, ValueError) as exc:
                raise UnsupportedFormatError(
                    f"Invalid base64 in {algorithm} integrity: {exc}"
                ) from exc
            return raw.hex()

    found = ", ".join(sorted(digests)) or "<none>"
    raise UnsupportedFormatError(f"Unsupported integrity algorithm(s): {found}")


def to_nested(
    version: str,
    flat_resolved: str,
    vcs: VcsHostConfig,
    integrity: str | None = None,
) -> ResolvedReference:
    """yarn.lock ``resolved`` (+ optional ``integrity``) -> package-lock reference."""
    source = classify_resolved(flat_resolved, vcs)

    if source.kind is SourceKind.VCS_TARBALL:
        return ResolvedReference(version=f"{vcs.scheme}:{source.repository}#{source.fragment}")
    if source.kind is SourceKind.GIT_URL:
        # the fragment pins a commit or tag, never a checksum
        return ResolvedReference(version, source.location, integrity)

    if source.fragment is None:
        return ResolvedReference(version, source.location, integrity)
    if not _HEX.match(source.fragment):
        # not a checksum; keep it on the URL
        return ResolvedReference(version, flat_resolved, integrity)
    return ResolvedReference(
        version,
        source.location,
        integrity or checksum_to_integrity(source.fragment),
    )


def to_flat(location: str, verification: str | None, vcs: VcsHostConfig) -> str:
    """package-lock ``resolved`` (or bare version) + ``integrity`` -> yarn.lock ``resolved``."""
    source = classify_location(location, vcs)

    if source.kind is SourceKind.VCS_TARBALL:
        if not source.repository or not source.fragment:
            raise UnsupportedFormatError(
                f"VCS reference {location!r} does not name a repository and commit"
            )
        return vcs.tarball_url(source.repository, source.fragment)
    if source.kind is SourceKind.GIT_URL:
        return source.location

    if not verification:
        return source.location
    return f"{source.location}#{integrity_to_checksum(verification)}"
