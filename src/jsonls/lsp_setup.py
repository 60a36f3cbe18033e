"""LSP server provisioning primitives shared by the adapter and the CLI.

The lifecycle is: resolve the latest version, install it into a container
directory unless already present, and fall back to whatever install is already
on disk when resolution or installation fails.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import anyio
import anyio.to_thread

from .errors import InstallFailed, RuntimeUnavailable, ServerUnavailable, UpstreamUnavailable
from .host import PackageTransport
from .languages.base import LanguageServerBinary, LspAdapter, VersionToken

SERVER_PACKAGE = "vscode-json-languageserver"
SERVER_PATH = "node_modules/vscode-json-languageserver/bin/vscode-json-languageserver"

logger = logging.getLogger(__name__)


def server_binary_arguments(server_path: Path) -> tuple[str, ...]:
    return (str(server_path), "--stdio")


def parse_command(command: Sequence[str] | str | None) -> list[str]:
    """Normalize command input into a tokenized argv list."""
    if command is None:
        return []

    if isinstance(command, str):
        return [part for part in shlex.split(command) if part]

    parsed: list[str] = []
    for part in command:
        text = str(part).strip()
        if text:
            parsed.append(text)
    return parsed


def format_command(command: Sequence[str]) -> str:
    """Return shell-safe command rendering for user-facing output."""
    return " ".join(shlex.quote(part) for part in parse_command(command))


def probe_command(command: Sequence[str] | str | None) -> dict[str, Any]:
    """Check whether the executable of a command is on PATH."""
    parsed = parse_command(command)
    if not parsed:
        return {"command": [], "available": False, "executable": None}

    executable = shutil.which(parsed[0])
    return {
        "command": parsed,
        "available": executable is not None,
        "executable": executable,
    }


async def _runtime_path(transport: PackageTransport) -> Path:
    try:
        return Path(await transport.binary_path())
    except Exception as exc:
        raise RuntimeUnavailable(f"package transport has no runtime executable: {exc}") from exc


async def latest_version(
    transport: PackageTransport, package_name: str = SERVER_PACKAGE
) -> VersionToken:
    """Ask the transport for the latest published version. No retries."""
    try:
        raw = await transport.latest_version(package_name)
    except Exception as exc:
        raise UpstreamUnavailable(f"cannot resolve latest {package_name}: {exc}") from exc

    try:
        return VersionToken(raw)
    except ValueError as exc:
        raise UpstreamUnavailable(f"malformed version for {package_name}: {raw!r}") from exc


async def ensure_binary(
    transport: PackageTransport,
    version: VersionToken,
    container_dir: Path,
    package_name: str = SERVER_PACKAGE,
) -> LanguageServerBinary:
    """Install *version* into *container_dir* unless its entry point already exists.

    Not transactional: two callers racing on the same directory may both
    install, which the transport tolerates.
    """
    server_path = Path(container_dir) / SERVER_PATH

    if await anyio.Path(server_path).exists():
        logger.debug("%s %s already installed at %s", package_name, version, server_path)
    else:
        try:
            await transport.install([(package_name, version.value)], Path(container_dir))
        except Exception as exc:
            raise InstallFailed(
                f"installing {package_name}@{version} into {container_dir} failed: {exc}"
            ) from exc
        if not await anyio.Path(server_path).exists():
            raise InstallFailed(
                f"{package_name}@{version} installed but {server_path} is missing"
            )

    return LanguageServerBinary(
        path=await _runtime_path(transport),
        arguments=server_binary_arguments(server_path),
    )


def _scan_version_dirs(container_dir: Path) -> list[Path]:
    """List immediate subdirectories in native enumeration order."""
    with os.scandir(container_dir) as entries:
        return [Path(entry.path) for entry in entries if entry.is_dir(follow_symlinks=False)]


async def find_cached(
    container_dir: Path, transport: PackageTransport
) -> LanguageServerBinary | None:
    """Return a launch descriptor for the most recently enumerated valid install.

    Enumeration order is the filesystem's, not a version comparison. The last
    directory observed wins; when it lacks the entry point, earlier directories
    are tried in reverse order. A miss returns None.
    """
    try:
        version_dirs = await anyio.to_thread.run_sync(_scan_version_dirs, Path(container_dir))
    except OSError as exc:
        logger.debug("No cached server binary in %s: %s", container_dir, exc)
        return None

    if not version_dirs:
        logger.debug("No cached server binary in %s: no version directories", container_dir)
        return None

    for version_dir in reversed(version_dirs):
        server_path = version_dir / SERVER_PATH
        if await anyio.Path(server_path).exists():
            return LanguageServerBinary(
                path=await _runtime_path(transport),
                arguments=server_binary_arguments(server_path),
            )
        logger.debug("Missing executable in directory %s", version_dir)

    return None


async def resolve_server_binary(adapter: LspAdapter, container_dir: Path) -> LanguageServerBinary:
    """Fetch the latest server into ``container_dir/<version>``, else use the cache."""
    try:
        version = await adapter.fetch_latest_server_version()
        return await adapter.fetch_server_binary(version, Path(container_dir) / version.value)
    except (UpstreamUnavailable, InstallFailed) as exc:
        logger.warning(
            "Falling back to cached %s binary in %s: %s", adapter.name(), container_dir, exc
        )
        cached = await adapter.cached_server_binary(Path(container_dir))
        if cached is None:
            raise ServerUnavailable(
                f"{adapter.name()} is unavailable: no install and no cached binary"
            ) from exc
        return cached
