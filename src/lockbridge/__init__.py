"""lockbridge core package.

Translates a project's dependency lock between npm's nested
``package-lock.json`` and Yarn's flat ``yarn.lock`` without touching a
registry. The conversion entrypoints live in :mod:`lockbridge.core`.
"""

__all__ = [
    "core",
]
