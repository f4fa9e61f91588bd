"""Serialise a lock table into Yarn v1 yarn.lock text.

Output follows the layout Yarn itself writes: an autogenerated header,
entries sorted by key, priority fields first, and quoting only where the
lockfile grammar needs it.
"""

from __future__ import annotations

import json
import re
from typing import Any
from collections.abc import Mapping

HEADER = (
    "# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.\n"
    "# yarn lockfile v1\n"
)

_PRIORITY = ("name", "version", "uid", "resolved", "integrity", "registry", "dependencies")
_NEEDS_QUOTES = re.compile(r'[:\s\\",\[\]]')


def _should_wrap(text: str) -> bool:
    return (
        text.startswith("true")
        or text.startswith("false")
        or bool(_NEEDS_QUOTES.search(text))
        or text[:1].isdigit()
        or not re.match(r"^[a-zA-Z]", text)
    )


def _maybe_wrap(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    text = str(value)
    return json.dumps(text) if _should_wrap(text) else text


def _sort_key(key: str) -> tuple[int, str]:
    if key in _PRIORITY:
        return (_PRIORITY.index(key), key)
    return (len(_PRIORITY), key)


def _lines(record: Mapping[str, Any], depth: int) -> list[str]:
    indent = "  " * depth
    out: list[str] = []
    for key in sorted(record, key=_sort_key):
        value = record[key]
        if value is None:
            continue
        if isinstance(value, Mapping):
            out.append(f"{indent}{_maybe_wrap(key)}:")
            out.extend(_lines(value, depth + 1))
        else:
            out.append(f"{indent}{_maybe_wrap(key)} {_maybe_wrap(value)}")
    return out


def format_key(descriptors: list[str]) -> str:
    return ", ".join(_maybe_wrap(d) for d in sorted(descriptors))


def dumps(table: Mapping[str, Mapping[str, Any]]) -> str:
    """Return yarn.lock text for a mapping of lock key -> record.

    Keys may already be comma-joined descriptor lists; each descriptor is
    quoted separately.
    """
    blocks: list[tuple[str, list[str]]] = []
    for key, record in table.items():
        descriptors = [part.strip() for part in key.split(",") if part.strip()]
        header = format_key(descriptors) + ":"
        blocks.append((header, [header, *_lines(record, 1)]))

    blocks.sort(key=lambda block: block[0])
    body = "\n\n".join("\n".join(lines) for _, lines in blocks)
    return HEADER + "\n\n" + body + "\n"
