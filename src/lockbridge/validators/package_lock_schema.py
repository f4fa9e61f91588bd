"""Shape validation for package-lock.json documents."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any
from collections.abc import Iterable

from jsonschema import Draft202012Validator

from ..errors import LockfileParseError

_SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "package-lock.schema.json"


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_package_lock(document: Any, source: str = "package-lock.json") -> None:
    """Raise LockfileParseError listing every schema violation in ``document``."""
    errors = sorted(_validator().iter_errors(document), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise LockfileParseError(f"{source} failed validation:\n" + _format_errors(errors))
