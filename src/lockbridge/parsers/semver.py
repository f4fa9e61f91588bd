"""npm semver range matching built atop packaging.version.

Supported expressions:
- exact versions (e.g., "1.2.3", "=1.2.3", "v1.2.3")
- caret ranges ^x.y.z, including the 0.x rules (^0.2.3 → <0.3.0)
- tilde ranges ~x.y.z and ~>x.y.z
- x-ranges: "1.x", "1.2.*", "*", "" and partial versions ("1", "1.2")
- hyphen ranges "1.2.3 - 2.3.4"
- comparator sets split by spaces, e.g., ">=1.0.0 <2.0.0"
- unions joined by "||"

Prerelease gating (npm only lets prereleases match comparators on the same
tuple) is not modelled.
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

_PARTIAL = re.compile(
    r"^v?(?P<major>\d+|[xX*])(?:\.(?P<minor>\d+|[xX*]))?(?:\.(?P<patch>\d+|[xX*]))?"
    r"(?P<rest>[-+][0-9A-Za-z.+-]*)?$"
)
_HYPHEN = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")
_OPERATOR_GAP = re.compile(r"(~>|<=|>=|<|>|=|\^|~)\s+")

Comparator = tuple[str, Version]


def _parse_partial(text: str) -> tuple[list[int], str]:
    """Return the numeric parts given (stopping at the first wildcard) and the suffix."""
    if text in ("", "*", "x", "X"):
        return [], ""
    m = _PARTIAL.match(text)
    if not m:
        raise InvalidVersion(text)
    parts: list[int] = []
    for key in ("major", "minor", "patch"):
        value = m.group(key)
        if value is None or value.lower() in {"x", "*"}:
            break
        parts.append(int(value))
    rest = m.group("rest") or ""
    if len(parts) < 3:
        rest = ""
    return parts, rest


def _version(parts: list[int], rest: str = "") -> Version:
    padded = parts + [0] * (3 - len(parts))
    return Version(".".join(str(p) for p in padded) + rest)


def _bump(parts: list[int]) -> Version:
    """Smallest version above every version matching the partial ``parts``."""
    bumped = parts[:-1] + [parts[-1] + 1]
    return _version(bumped)


def _caret_upper(parts: list[int]) -> Version:
    major = parts[0]
    if major > 0 or len(parts) == 1:
        return _version([major + 1])
    minor = parts[1]
    if len(parts) == 2 or minor > 0:
        return _version([0, minor + 1])
    return _version([0, 0, parts[2] + 1])


def _x_range(parts: list[int], rest: str) -> list[Comparator]:
    if not parts:
        return []
    if len(parts) == 3:
        return [("==", _version(parts, rest))]
    return [(">=", _version(parts)), ("<", _bump(parts))]


def _comparators(token: str) -> list[Comparator]:
    if token.startswith("^"):
        parts, rest = _parse_partial(token[1:])
        if not parts:
            return []
        return [(">=", _version(parts, rest)), ("<", _caret_upper(parts))]

    if token.startswith("~"):
        body = token[2:] if token.startswith("~>") else token[1:]
        parts, rest = _parse_partial(body)
        if not parts:
            return []
        upper = _bump(parts[:1]) if len(parts) == 1 else _bump(parts[:2])
        return [(">=", _version(parts, rest)), ("<", upper)]

    for op in (">=", "<=", ">", "<", "="):
        if token.startswith(op):
            parts, rest = _parse_partial(token[len(op):])
            break
    else:
        op = ""
        parts, rest = _parse_partial(token)

    if op in ("", "="):
        return _x_range(parts, rest)
    if not parts:
        # ">=*" matches anything, "<*" matches nothing
        return [] if op in (">=", "<=") else [("<", Version("0"))]
    if len(parts) == 3:
        return [(op, _version(parts, rest))]
    if op == ">=":
        return [(">=", _version(parts))]
    if op == ">":
        return [(">=", _bump(parts))]
    if op == "<":
        return [("<", _version(parts))]
    return [("<", _bump(parts))]


def _comparator_set(expr: str) -> list[Comparator]:
    hyphen = _HYPHEN.match(expr)
    if hyphen:
        low, low_rest = _parse_partial(hyphen.group(1))
        high, high_rest = _parse_partial(hyphen.group(2))
        result: list[Comparator] = []
        if low:
            result.append((">=", _version(low, low_rest)))
        if len(high) == 3:
            result.append(("<=", _version(high, high_rest)))
        elif high:
            result.append(("<", _bump(high)))
        return result

    result = []
    for token in _OPERATOR_GAP.sub(r"\1", expr).split():
        result.extend(_comparators(token))
    return result


def _check(v: Version, op: str, bound: Version) -> bool:
    if op == ">=":
        return v >= bound
    if op == ">":
        return v > bound
    if op == "<=":
        return v <= bound
    if op == "<":
        return v < bound
    return v == bound


def satisfies(installed: str, expr: str) -> bool:
    """Return True when ``installed`` falls inside the npm range ``expr``.

    Non-semver ranges (tags, URLs, ``file:`` specs) only match by exact string.
    """
    expr = expr.strip()
    if installed == expr:
        return True
    try:
        v = Version(installed)
    except InvalidVersion:
        return False

    for alternative in expr.split("||"):
        try:
            comparators = _comparator_set(alternative.strip())
        except InvalidVersion:
            continue
        if all(_check(v, op, bound) for op, bound in comparators):
            return True
    return False
