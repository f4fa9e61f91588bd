"""Parse Yarn v1 yarn.lock text into a table of lock key -> record.

Only the classic (v1) format is understood. Top-level keys keep the
comma-joined descriptor list they were written with, e.g.
``"lodash@^4.17.0, lodash@^4.17.21"``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import LockfileParseError

_INDENT = 2


def _read_string(text: str, start: int, lineno: int) -> tuple[str, int]:
    end = start + 1
    while end < len(text):
        if text[end] == "\\":
            end += 2
            continue
        if text[end] == '"':
            break
        end += 1
    else:
        raise LockfileParseError(f"yarn.lock line {lineno}: unterminated string")
    try:
        return json.loads(text[start : end + 1]), end + 1
    except json.JSONDecodeError as exc:
        raise LockfileParseError(f"yarn.lock line {lineno}: invalid string: {exc}") from exc


def _tokenize(text: str, lineno: int) -> list[tuple[str, Any]]:
    tokens: list[tuple[str, Any]] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in " \t":
            i += 1
        elif ch == ",":
            tokens.append(("comma", ch))
            i += 1
        elif ch == ":" and (i + 1 == len(text) or text[i + 1] in " \t"):
            tokens.append(("colon", ch))
            i += 1
        elif ch == '"':
            value, i = _read_string(text, i, lineno)
            tokens.append(("value", value))
        else:
            j = i
            while j < len(text) and text[j] not in ' \t,"':
                if text[j] == ":" and (j + 1 == len(text) or text[j + 1] in " \t"):
                    break
                j += 1
            word = text[i:j]
            if word in ("true", "false"):
                tokens.append(("value", word == "true"))
            else:
                tokens.append(("value", word))
            i = j
    return tokens


def _keys(tokens: list[tuple[str, Any]], lineno: int) -> list[str]:
    keys: list[str] = []
    expect_key = True
    for kind, value in tokens:
        if expect_key and kind == "value":
            keys.append(str(value))
            expect_key = False
        elif not expect_key and kind == "comma":
            expect_key = True
        else:
            raise LockfileParseError(f"yarn.lock line {lineno}: malformed key list")
    if expect_key:
        raise LockfileParseError(f"yarn.lock line {lineno}: malformed key list")
    return keys


def loads(text: str) -> dict[str, dict[str, Any]]:
    """Return lock key -> record mapping from yarn.lock ``text``."""
    if "__metadata:" in text:
        raise LockfileParseError("Yarn Berry (v2+) lockfiles are not supported")

    root: dict[str, Any] = {}
    stack: list[tuple[int, dict[str, Any]]] = [(-1, root)]

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip()
        stripped = line.lstrip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(line) - len(stripped)
        if indent % _INDENT:
            raise LockfileParseError(f"yarn.lock line {lineno}: unexpected indentation")

        while stack[-1][0] >= indent:
            stack.pop()
        container = stack[-1][1]
        if indent > 0 and container is root:
            raise LockfileParseError(f"yarn.lock line {lineno}: indented line outside an entry")

        tokens = _tokenize(stripped, lineno)
        if tokens and tokens[-1][0] == "colon":
            keys = _keys(tokens[:-1], lineno)
            child: dict[str, Any] = {}
            container[", ".join(keys)] = child
            stack.append((indent, child))
            continue

        if len(tokens) != 2 or any(kind != "value" for kind, _ in tokens):
            raise LockfileParseError(f"yarn.lock line {lineno}: expected '<key> <value>'")
        if container is root:
            raise LockfileParseError(f"yarn.lock line {lineno}: value outside an entry")
        container[str(tokens[0][1])] = tokens[1][1]

    return root


def parse(path: Path) -> dict[str, dict[str, Any]]:
    """Return lock key -> record mapping from a yarn.lock file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockfileParseError(f"Failed to read {path}: {exc}") from exc
    return loads(text)
