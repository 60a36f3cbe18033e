"""
Language server adapter interface and shared data structures.

Defines the LspAdapter protocol the host drives to provision and configure a
language server, plus the value types (VersionToken, LanguageServerBinary)
passed between the resolver, installer and binary cache.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ..host import HostContext


@dataclass(frozen=True)
class VersionToken:
    """Opaque package version shared by the resolver and the installer."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError(f"invalid version {self.value!r}")
        # Also used as a directory name under the container directory.
        if "/" in self.value or os.sep in self.value or self.value in {".", ".."}:
            raise ValueError(f"version {self.value!r} is not a valid directory name")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LanguageServerBinary:
    """Runtime executable plus the argv needed to start the server."""

    path: Path
    arguments: tuple[str, ...] = ()

    def command(self) -> list[str]:
        return [str(self.path), *self.arguments]

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "arguments": list(self.arguments)}


@runtime_checkable
class LspAdapter(Protocol):
    """Protocol defining what a language server adapter must implement."""

    def name(self) -> str:
        """Unique server name, also used as the container directory name."""
        ...

    def short_name(self) -> str:
        ...

    async def fetch_latest_server_version(self) -> VersionToken:
        """Resolve the version to install. Raises UpstreamUnavailable."""
        ...

    async def fetch_server_binary(
        self, version: VersionToken, container_dir: Path
    ) -> LanguageServerBinary:
        """Install *version* if needed. Raises InstallFailed or RuntimeUnavailable."""
        ...

    async def cached_server_binary(self, container_dir: Path) -> LanguageServerBinary | None:
        """Return a previously installed binary, or None on a cache miss."""
        ...

    async def installation_test_binary(self, container_dir: Path) -> LanguageServerBinary | None:
        ...

    def initialization_options(self) -> dict[str, Any] | None:
        ...

    def workspace_configuration(self, workspace_root: Path, host: HostContext) -> dict[str, Any]:
        ...

    def language_ids(self) -> dict[str, str]:
        """Map host language names to the server's language identifiers."""
        ...


class BaseLspAdapter:
    """
    Base class for adapters with the optional hooks defaulted.

    Subclasses must implement:
    - name() / short_name()
    - fetch_latest_server_version()
    - fetch_server_binary()
    - cached_server_binary()
    """

    def name(self) -> str:
        raise NotImplementedError

    def short_name(self) -> str:
        raise NotImplementedError

    async def fetch_latest_server_version(self) -> VersionToken:
        raise NotImplementedError

    async def fetch_server_binary(
        self, version: VersionToken, container_dir: Path
    ) -> LanguageServerBinary:
        raise NotImplementedError

    async def cached_server_binary(self, container_dir: Path) -> LanguageServerBinary | None:
        raise NotImplementedError

    async def installation_test_binary(self, container_dir: Path) -> LanguageServerBinary | None:
        """Binary used by the host's installation self-test. Default: none."""
        del container_dir
        return None

    def initialization_options(self) -> dict[str, Any] | None:
        return None

    def workspace_configuration(self, workspace_root: Path, host: HostContext) -> dict[str, Any]:
        """Per-workspace configuration. Default: empty document."""
        del workspace_root, host
        return {}

    def language_ids(self) -> dict[str, str]:
        return {}
