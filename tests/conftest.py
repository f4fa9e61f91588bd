"""Shared fixtures: build throwaway projects with an installed node_modules tree."""

from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def sha1_integrity(hex_digest: str) -> str:
    return "sha1-" + base64.b64encode(bytes.fromhex(hex_digest)).decode("ascii")


@pytest.fixture
def make_project(tmp_path):
    """Return a factory writing package.json plus installed packages under tmp_path.

    ``installed`` maps install paths (``node_modules/a/node_modules/b``) to
    the package.json each installed package carries.
    """

    def _make(manifest: dict, installed: dict[str, dict]) -> Path:
        write_json(tmp_path / "package.json", manifest)
        (tmp_path / "node_modules").mkdir(exist_ok=True)
        for path, package_json in installed.items():
            write_json(tmp_path / path / "package.json", package_json)
        return tmp_path

    return _make


LODASH_SHA1 = "679591c564c3bffaae8454cf0b3df370c3d6911c"
LEFT_PAD_SHA1 = "5b8a3a7765dfe001261dde915589e782f8c94d1e"
OLD_LEFT_PAD_SHA1 = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture
def sample_manifest() -> dict:
    return {
        "name": "app",
        "version": "1.0.0",
        "dependencies": {
            "lodash": "^4.17.0",
            "left-pad": "^1.3.0",
            "@acme/widget": "github:acme/widget#deadbeef",
        },
        "devDependencies": {"legacy": "^2.0.0"},
    }


@pytest.fixture
def sample_installed() -> dict[str, dict]:
    """Hoisted left-pad 1.3.0 plus a nested 1.0.0 under legacy."""
    return {
        "node_modules/lodash": {"name": "lodash", "version": "4.17.21"},
        "node_modules/left-pad": {"name": "left-pad", "version": "1.3.0"},
        "node_modules/@acme/widget": {
            "name": "@acme/widget",
            "version": "1.2.0",
            "dependencies": {"lodash": "^4.0.0"},
        },
        "node_modules/legacy": {
            "name": "legacy",
            "version": "2.1.0",
            "dependencies": {"left-pad": "~1.0.0"},
        },
        "node_modules/legacy/node_modules/left-pad": {"name": "left-pad", "version": "1.0.0"},
    }


SAMPLE_YARN_LOCK = f"""\
# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.
# yarn lockfile v1


"@acme/widget@github:acme/widget#deadbeef":
  version "1.2.0"
  resolved "https://codeload.github.com/acme/widget/tar.gz/deadbeef"
  dependencies:
    lodash "^4.0.0"

left-pad@^1.3.0:
  version "1.3.0"
  resolved "https://registry.yarnpkg.com/left-pad/-/left-pad-1.3.0.tgz#{LEFT_PAD_SHA1}"

left-pad@~1.0.0:
  version "1.0.0"
  resolved "https://registry.yarnpkg.com/left-pad/-/left-pad-1.0.0.tgz#{OLD_LEFT_PAD_SHA1}"

legacy@^2.0.0:
  version "2.1.0"
  resolved "https://registry.yarnpkg.com/legacy/-/legacy-2.1.0.tgz"
  dependencies:
    left-pad "~1.0.0"

lodash@^4.0.0, lodash@^4.17.0:
  version "4.17.21"
  resolved "https://registry.yarnpkg.com/lodash/-/lodash-4.17.21.tgz#{LODASH_SHA1}"
"""


@pytest.fixture
def sample_package_lock() -> dict:
    return {
        "name": "app",
        "version": "1.0.0",
        "lockfileVersion": 1,
        "requires": True,
        "dependencies": {
            "@acme/widget": {
                "version": "github:acme/widget#deadbeef",
                "requires": {"lodash": "4.17.21"},
            },
            "left-pad": {
                "version": "1.3.0",
                "resolved": "https://registry.yarnpkg.com/left-pad/-/left-pad-1.3.0.tgz",
                "integrity": sha1_integrity(LEFT_PAD_SHA1),
            },
            "legacy": {
                "version": "2.1.0",
                "resolved": "https://registry.yarnpkg.com/legacy/-/legacy-2.1.0.tgz",
                "requires": {"left-pad": "1.0.0"},
                "dependencies": {
                    "left-pad": {
                        "version": "1.0.0",
                        "resolved": "https://registry.yarnpkg.com/left-pad/-/left-pad-1.0.0.tgz",
                        "integrity": sha1_integrity(OLD_LEFT_PAD_SHA1),
                    }
                },
            },
            "lodash": {
                "version": "4.17.21",
                "resolved": "https://registry.yarnpkg.com/lodash/-/lodash-4.17.21.tgz",
                "integrity": sha1_integrity(LODASH_SHA1),
            },
        },
    }
