"""Configuration loader for lock translation.

Reads settings from a JSON file and validates the structure. The file is
optional; when neither an explicit path nor ``LOCKBRIDGE_CONFIG`` is given
the built-in defaults are used. Recognised keys::

    {
      "vcs": {"scheme": "github", "tarballHost": "codeload.github.com"},
      "indent": 2
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import LockbridgeError

CONFIG_PATH_ENV_VAR = "LOCKBRIDGE_CONFIG"
DEFAULT_VCS_SCHEME = "github"
DEFAULT_TARBALL_HOST = "codeload.github.com"


class ConfigError(LockbridgeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class VcsHostConfig:
    """How VCS-hosted tarballs are recognised and rebuilt."""

    scheme: str = DEFAULT_VCS_SCHEME
    tarball_host: str = DEFAULT_TARBALL_HOST

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VcsHostConfig:
        scheme = data.get("scheme", DEFAULT_VCS_SCHEME)
        if not isinstance(scheme, str) or not scheme or ":" in scheme:
            raise ConfigError("'vcs.scheme' must be a non-empty string without ':'")

        tarball_host = data.get("tarballHost", DEFAULT_TARBALL_HOST)
        if not isinstance(tarball_host, str) or not tarball_host:
            raise ConfigError("'vcs.tarballHost' must be a non-empty string")

        return cls(scheme=scheme, tarball_host=tarball_host.lower())

    def tarball_url(self, repository: str, ref: str) -> str:
        return f"https://{self.tarball_host}/{repository}/tar.gz/{ref}"


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    vcs: VcsHostConfig = field(default_factory=VcsHostConfig)
    indent: int = 2

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        vcs_data = data.get("vcs", {})
        if not isinstance(vcs_data, dict):
            raise ConfigError("'vcs' must be an object")

        indent = data.get("indent", 2)
        if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
            raise ConfigError("'indent' must be a non-negative integer")

        return cls(vcs=VcsHostConfig.from_dict(vcs_data), indent=indent)


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. LOCKBRIDGE_CONFIG environment variable
    3. None (use defaults)
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return None


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings from a JSON file.

    Args:
        path: Optional path to the config file. If not provided, uses the
            LOCKBRIDGE_CONFIG env var or falls back to the defaults.

    Returns:
        A validated Settings object.

    Raises:
        ConfigError: If a named file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return Settings()

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    return Settings.from_dict(data)
