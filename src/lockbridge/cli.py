"""CLI entrypoint for converting between yarn.lock and package-lock.json.

Usage:
  lockbridge --source-file path/to/yarn.lock [--config settings.json] [--verbose]

The converted lockfile is written next to the source file. The project's
node_modules directory must be installed, since both directions read the
installed tree.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import core
from .errors import LockbridgeError
from .settings import load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONVERSION_FAILED = 1
EXIT_USAGE = 2

_DESTINATIONS = {
    core.YARN_LOCK: core.PACKAGE_LOCK,
    core.PACKAGE_LOCK: core.YARN_LOCK,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lockbridge", description=__doc__.split("\n\n")[0])
    parser.add_argument(
        "-s",
        "--source-file",
        type=Path,
        default=None,
        help="Path to the yarn.lock or package-lock.json to convert",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional JSON settings file (overrides LOCKBRIDGE_CONFIG)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print the conversion report as JSON on stdout",
    )
    return parser


def _usage_problem(source: Path | None) -> str | None:
    """Return why ``source`` cannot be converted, or None when it can."""
    if source is None:
        return "no source file given"
    if source.name not in _DESTINATIONS:
        return f"source file must be named {core.YARN_LOCK} or {core.PACKAGE_LOCK}"
    if not source.is_file():
        return f"source file {source} does not exist or is not a file"
    destination = source.parent / _DESTINATIONS[source.name]
    if destination.exists():
        return f"destination file {destination} already exists"
    node_modules = source.parent / "node_modules"
    if not node_modules.is_dir():
        return f"{node_modules} must exist and be a directory; install dependencies first"
    return None


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    problem = _usage_problem(args.source_file)
    if problem is not None:
        print(f"ERROR: {problem}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    source: Path = args.source_file
    root = source.parent
    destination = root / _DESTINATIONS[source.name]

    try:
        settings = load_settings(args.config)
        if source.name == core.YARN_LOCK:
            result = core.yarn_to_npm(root, settings)
        else:
            result = core.npm_to_yarn(root, settings)
    except LockbridgeError as exc:
        logger.error("Conversion of %s failed: %s", source, exc)
        return EXIT_CONVERSION_FAILED

    destination.write_text(result.content, encoding="utf-8")
    logger.info("Wrote %s", destination)
    if args.report:
        print(json.dumps(result.report, indent=2))
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
