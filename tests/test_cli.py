"""Tests for the lockbridge command line."""

import json

import pytest

from lockbridge import cli, core
from lockbridge.errors import UnsupportedFormatError
from lockbridge.report import ConversionResult, aggregate

from conftest import SAMPLE_YARN_LOCK


@pytest.fixture
def project(tmp_path):
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "package.json").write_text('{"name": "app", "version": "1.0.0"}')
    return tmp_path


@pytest.fixture
def fake_converters(monkeypatch):
    calls = []

    def _fake(direction, content):
        def _convert(root, settings=None):
            calls.append((direction, root))
            return ConversionResult(content, aggregate(direction, [], []))

        return _convert

    monkeypatch.setattr(core, "yarn_to_npm", _fake("yarn-to-npm", '{"mockedResult": true}\n'))
    monkeypatch.setattr(core, "npm_to_yarn", _fake("npm-to-yarn", "# yarn lockfile v1\n"))
    return calls


def test_converts_yarn_lock_to_package_lock(project, fake_converters):
    (project / "yarn.lock").write_text("")

    assert cli.main(["--source-file", str(project / "yarn.lock")]) == cli.EXIT_OK

    assert fake_converters == [("yarn-to-npm", project)]
    assert json.loads((project / "package-lock.json").read_text()) == {"mockedResult": True}


def test_converts_package_lock_to_yarn_lock(project, fake_converters):
    (project / "package-lock.json").write_text("{}")

    assert cli.main(["-s", str(project / "package-lock.json")]) == cli.EXIT_OK

    assert fake_converters == [("npm-to-yarn", project)]
    assert (project / "yarn.lock").read_text() == "# yarn lockfile v1\n"


def test_report_flag_prints_json(project, fake_converters, capsys):
    (project / "yarn.lock").write_text("")

    cli.main(["--source-file", str(project / "yarn.lock"), "--report"])

    assert json.loads(capsys.readouterr().out)["direction"] == "yarn-to-npm"


@pytest.mark.parametrize(
    "setup,source_name",
    [
        ("none", None),
        ("bad-name", "foo"),
        ("source-is-dir", "yarn.lock"),
        ("source-missing", "yarn.lock"),
        ("destination-exists", "package-lock.json"),
        ("node-modules-is-file", "package-lock.json"),
    ],
)
def test_usage_errors_exit_2(project, fake_converters, capsys, setup, source_name):
    if setup == "bad-name":
        (project / "foo").write_text("")
    elif setup == "source-is-dir":
        (project / "yarn.lock").mkdir()
    elif setup == "destination-exists":
        (project / "package-lock.json").write_text("{}")
        (project / "yarn.lock").write_text("")
    elif setup == "node-modules-is-file":
        (project / "package-lock.json").write_text("{}")
        (project / "node_modules").rmdir()
        (project / "node_modules").write_text("")

    before = sorted(p.name for p in project.iterdir())
    argv = [] if source_name is None else ["--source-file", str(project / source_name)]

    assert cli.main(argv) == cli.EXIT_USAGE
    assert fake_converters == []
    assert "usage: lockbridge" in capsys.readouterr().err
    assert sorted(p.name for p in project.iterdir()) == before


def test_conversion_error_exits_1(project, monkeypatch):
    (project / "package-lock.json").write_text("{}")

    def _fail(root, settings=None):
        raise UnsupportedFormatError("Unsupported integrity algorithm(s): md5", package="x", version="1.0.0")

    monkeypatch.setattr(core, "npm_to_yarn", _fail)

    assert cli.main(["--source-file", str(project / "package-lock.json")]) == cli.EXIT_CONVERSION_FAILED
    assert not (project / "yarn.lock").exists()


def test_bad_config_exits_1(project, fake_converters, tmp_path):
    (project / "yarn.lock").write_text("")

    argv = ["--source-file", str(project / "yarn.lock"), "--config", str(tmp_path / "missing.json")]

    assert cli.main(argv) == cli.EXIT_CONVERSION_FAILED
    assert fake_converters == []


def test_real_conversion(make_project, sample_manifest, sample_installed, sample_package_lock):
    root = make_project(sample_manifest, sample_installed)
    (root / "yarn.lock").write_text(SAMPLE_YARN_LOCK)

    assert cli.main(["--source-file", str(root / "yarn.lock")]) == cli.EXIT_OK

    assert json.loads((root / "package-lock.json").read_text()) == sample_package_lock
