"""Exception hierarchy shared by the translation engine and the I/O layer."""

from __future__ import annotations


class LockbridgeError(RuntimeError):
    """Base error for failures that abort a conversion."""


class LockfileParseError(LockbridgeError):
    """Raised when a lockfile or manifest cannot be read into memory."""


class UnsupportedFormatError(LockbridgeError):
    """Raised when a reference uses an encoding the translator does not understand.

    The codec raises it without package context; the assemblers re-raise it
    with the offending package name and version attached.
    """

    def __init__(
        self,
        message: str,
        *,
        package: str | None = None,
        version: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.package = package
        self.version = version

    def __str__(self) -> str:
        if self.package is None:
            return self.message
        return f"{self.package}@{self.version}: {self.message}"

    def for_package(self, package: str, version: str) -> UnsupportedFormatError:
        return UnsupportedFormatError(self.message, package=package, version=version)
