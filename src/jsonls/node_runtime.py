"""npm-backed package transport for Node language servers."""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import anyio

from .errors import TransportError
from .lsp_setup import parse_command

NPM_COMMAND_ENV_VAR = "JSONLS_NPM_COMMAND"
NODE_COMMAND_ENV_VAR = "JSONLS_NODE_COMMAND"
NPM_TIMEOUT_ENV_VAR = "JSONLS_NPM_TIMEOUT"

logger = logging.getLogger(__name__)


def _timeout_from_env() -> float | None:
    """Parse the optional npm timeout; invalid or non-positive values disable it."""
    raw = os.getenv(NPM_TIMEOUT_ENV_VAR, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", NPM_TIMEOUT_ENV_VAR, raw)
        return None
    return value if value > 0 else None


class NpmPackageTransport:
    """Run ``npm`` to query and install packages, and locate ``node``."""

    def __init__(
        self,
        npm_command: Sequence[str] | str | None = None,
        node_command: str | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._npm_command = parse_command(
            npm_command if npm_command is not None else os.getenv(NPM_COMMAND_ENV_VAR, "npm")
        ) or ["npm"]
        self._node_command = (
            node_command or os.getenv(NODE_COMMAND_ENV_VAR, "").strip() or "node"
        )
        self._timeout = timeout if timeout is not None else _timeout_from_env()

    @property
    def npm_command(self) -> list[str]:
        return list(self._npm_command)

    @property
    def node_command(self) -> str:
        return self._node_command

    async def _run_npm(self, args: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
        command = [*self._npm_command, *args]
        logger.debug("Running %s", command)
        try:
            with anyio.fail_after(self._timeout):
                completed = await anyio.run_process(command, check=False)
        except TimeoutError as exc:
            raise TransportError(f"npm timed out after {self._timeout}s: {command}") from exc
        except OSError as exc:
            raise TransportError(f"failed to run {command}: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise TransportError(
                f"{command} exited with status {completed.returncode}: {stderr[:500]}"
            )
        return completed

    async def latest_version(self, package_name: str) -> str:
        completed = await self._run_npm(["info", package_name, "--json"])
        try:
            payload: Any = json.loads(completed.stdout.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TransportError(f"npm info returned invalid JSON for {package_name}") from exc

        if not isinstance(payload, dict):
            raise TransportError(f"npm info returned unexpected payload for {package_name}")

        dist_tags = payload.get("dist-tags")
        if isinstance(dist_tags, dict) and isinstance(dist_tags.get("latest"), str):
            return dist_tags["latest"]
        version = payload.get("version")
        if isinstance(version, str):
            return version
        raise TransportError(f"npm info reported no version for {package_name}")

    async def install(self, packages: Sequence[tuple[str, str]], directory: Path) -> None:
        if not packages:
            return
        await anyio.Path(directory).mkdir(parents=True, exist_ok=True)
        specs = [f"{name}@{version}" for name, version in packages]
        logger.info("Installing %s into %s", ", ".join(specs), directory)
        await self._run_npm(["install", "--prefix", str(directory), *specs])

    async def binary_path(self) -> Path:
        executable = shutil.which(self._node_command)
        if executable is None:
            raise TransportError(f"node runtime {self._node_command!r} was not found on PATH")
        return Path(executable)
