"""End-to-end conversion tests on projects written to disk."""

import json

import pytest

from lockbridge import core
from lockbridge.errors import LockfileParseError, UnsupportedFormatError
from lockbridge.parsers.yarn_lock import loads
from lockbridge.settings import Settings
from lockbridge.writers.yarn_lock import HEADER

from conftest import (
    LEFT_PAD_SHA1,
    LODASH_SHA1,
    SAMPLE_YARN_LOCK,
    sha1_integrity,
    write_json,
)


@pytest.fixture
def project(make_project, sample_manifest, sample_installed):
    return make_project(sample_manifest, sample_installed)


class TestYarnToNpm:
    def test_matches_expected_package_lock(self, project, sample_package_lock):
        (project / "yarn.lock").write_text(SAMPLE_YARN_LOCK, encoding="utf-8")

        result = core.yarn_to_npm(project, Settings())

        assert json.loads(result.content) == sample_package_lock
        assert result.report["totals"] == {"converted": 5, "skipped": 0}

    def test_bundled_dependencies_are_skipped(self, project):
        (project / "yarn.lock").write_text(SAMPLE_YARN_LOCK, encoding="utf-8")
        write_json(
            project / "node_modules/lodash/node_modules/vendored/package.json",
            {"name": "vendored", "version": "0.0.1"},
        )

        result = core.yarn_to_npm(project, Settings())

        lodash = json.loads(result.content)["dependencies"]["lodash"]
        assert "dependencies" not in lodash
        assert result.skipped == ["vendored@0.0.1"]

    def test_indent_setting(self, project):
        (project / "yarn.lock").write_text(SAMPLE_YARN_LOCK, encoding="utf-8")
        result = core.yarn_to_npm(project, Settings(indent=4))
        assert result.content.startswith('{\n    "name": "app"')

    def test_missing_yarn_lock(self, project):
        with pytest.raises(LockfileParseError):
            core.yarn_to_npm(project, Settings())


class TestNpmToYarn:
    def test_produces_keyed_yarn_entries(self, project, sample_package_lock):
        write_json(project / "package-lock.json", sample_package_lock)

        result = core.npm_to_yarn(project, Settings())

        assert result.content.startswith(HEADER)
        table = loads(result.content)
        assert set(table) == set(loads(SAMPLE_YARN_LOCK))

        lodash = table["lodash@^4.0.0, lodash@^4.17.0"]
        assert lodash["resolved"].endswith(f"lodash-4.17.21.tgz#{LODASH_SHA1}")
        assert lodash["integrity"] == sha1_integrity(LODASH_SHA1)
        assert "dependencies" not in lodash

        widget = table["@acme/widget@github:acme/widget#deadbeef"]
        assert widget == {
            "version": "1.2.0",
            "resolved": "https://codeload.github.com/acme/widget/tar.gz/deadbeef",
            "dependencies": {"lodash": "^4.0.0"},
        }
        assert table["left-pad@^1.3.0"]["resolved"].endswith(f"#{LEFT_PAD_SHA1}")
        assert table["left-pad@~1.0.0"]["version"] == "1.0.0"
        assert result.report["totals"] == {"converted": 5, "skipped": 0}

    def test_bundled_package_lock_entries_are_not_written(self, project, sample_package_lock):
        sample_package_lock["dependencies"]["legacy"]["dependencies"]["inner"] = {
            "version": "2.0.0",
            "bundled": True,
        }
        write_json(project / "package-lock.json", sample_package_lock)
        write_json(
            project / "node_modules/legacy/node_modules/inner/package.json",
            {"name": "inner", "version": "2.0.0"},
        )

        result = core.npm_to_yarn(project, Settings())

        table = loads(result.content)
        assert not [key for key in table if key.startswith("inner@")]
        assert result.skipped == ["inner@2.0.0"]

    def test_unsupported_integrity_aborts(self, project, sample_package_lock):
        sample_package_lock["dependencies"]["lodash"]["integrity"] = "sha256-AAAA"
        write_json(project / "package-lock.json", sample_package_lock)

        with pytest.raises(UnsupportedFormatError, match="lodash@4.17.21"):
            core.npm_to_yarn(project, Settings())


def test_round_trip_preserves_resolved_urls(project):
    (project / "yarn.lock").write_text(SAMPLE_YARN_LOCK, encoding="utf-8")
    package_lock = core.yarn_to_npm(project, Settings()).content
    (project / "yarn.lock").unlink()
    (project / "package-lock.json").write_text(package_lock, encoding="utf-8")

    table = loads(core.npm_to_yarn(project, Settings()).content)

    original = loads(SAMPLE_YARN_LOCK)
    assert {key: record["resolved"] for key, record in table.items()} == {
        key: record["resolved"] for key, record in original.items()
    }
    assert {key: record["version"] for key, record in table.items()} == {
        key: record["version"] for key, record in original.items()
    }
