#!/usr/bin/env python3
"""CLI tool for provisioning and inspecting the JSON language server."""

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import anyio

from . import paths
from .errors import ProvisioningError
from .host import StaticHostContext
from .languages.base import LanguageServerBinary
from .languages.json_lsp_plugin import JsonLspAdapter
from .lsp_setup import format_command, probe_command, resolve_server_binary
from .node_runtime import NODE_COMMAND_ENV_VAR, NPM_COMMAND_ENV_VAR, NpmPackageTransport


@dataclass
class ToolStatus:
    """Availability of one external command the transport depends on."""

    name: str
    command: list[str]
    env_var: str
    executable: str | None
    available: bool


def _container_dir(args: argparse.Namespace, adapter: JsonLspAdapter) -> Path:
    if args.container:
        return Path(args.container).expanduser()
    return paths.container_dir_for(adapter.name())


def _collect_tool_statuses(transport: NpmPackageTransport) -> list[ToolStatus]:
    """Probe npm and node on PATH."""
    statuses: list[ToolStatus] = []
    for name, command, env_var in (
        ("npm", transport.npm_command, NPM_COMMAND_ENV_VAR),
        ("node", [transport.node_command], NODE_COMMAND_ENV_VAR),
    ):
        probe = probe_command(command)
        statuses.append(
            ToolStatus(
                name=name,
                command=probe["command"],
                env_var=env_var,
                executable=probe["executable"],
                available=bool(probe["available"]),
            )
        )
    return statuses


def _print_binary(binary: LanguageServerBinary | None, as_json: bool) -> None:
    """Render a launch descriptor, or a cache miss."""
    if as_json:
        print(json.dumps({"binary": binary.to_dict() if binary else None}, indent=2))
    elif binary is None:
        print("No cached JSON language server found.")
    else:
        print(format_command(binary.command()))


def _print_doctor(
    statuses: list[ToolStatus], cached: LanguageServerBinary | None, as_json: bool
) -> None:
    """Render `doctor` command output."""
    ready = all(s.available for s in statuses)

    if as_json:
        payload = {
            "ready": ready,
            "tools": [
                {
                    "name": s.name,
                    "available": s.available,
                    "command": s.command,
                    "executable": s.executable,
                    "env_var": s.env_var,
                }
                for s in statuses
            ],
            "cached_binary": cached.to_dict() if cached else None,
        }
        print(json.dumps(payload, indent=2))
        return

    for s in statuses:
        marker = "OK" if s.available else "MISSING"
        location = s.executable or f"set {s.env_var} to override"
        print(f"[{marker}] {s.name}: {format_command(s.command)} ({location})")
    if cached is None:
        print("Cached server: none")
    else:
        print(f"Cached server: {format_command(cached.command())}")
    print("\nReady." if ready else "\nInstall Node.js and npm to provision the server.")


async def _doctor(args: argparse.Namespace) -> None:
    transport = NpmPackageTransport()
    adapter = JsonLspAdapter(transport)
    statuses = _collect_tool_statuses(transport)
    cached: LanguageServerBinary | None = None
    if any(s.name == "node" and s.available for s in statuses):
        cached = await adapter.cached_server_binary(_container_dir(args, adapter))
    _print_doctor(statuses, cached, as_json=args.json)


async def _install(args: argparse.Namespace) -> int:
    adapter = JsonLspAdapter(NpmPackageTransport())
    try:
        binary = await resolve_server_binary(adapter, _container_dir(args, adapter))
    except ProvisioningError as exc:
        if args.json:
            print(json.dumps({"binary": None, "error": str(exc)}, indent=2))
        else:
            print(f"Failed to provision {adapter.name()}: {exc}", file=sys.stderr)
        return 1
    _print_binary(binary, args.json)
    return 0


async def _cached(args: argparse.Namespace) -> int:
    adapter = JsonLspAdapter(NpmPackageTransport())
    try:
        binary = await adapter.cached_server_binary(_container_dir(args, adapter))
    except ProvisioningError as exc:
        print(f"Cannot inspect cache: {exc}", file=sys.stderr)
        return 1
    _print_binary(binary, args.json)
    return 0 if binary is not None else 1


def _config(args: argparse.Namespace) -> None:
    adapter = JsonLspAdapter(NpmPackageTransport())
    host = StaticHostContext(experimental=args.experimental)
    workspace = Path(args.workspace).expanduser() if args.workspace else Path.cwd()
    payload = {
        "initialization_options": adapter.initialization_options(),
        "workspace_configuration": adapter.workspace_configuration(workspace, host),
        "language_ids": adapter.language_ids(),
    }
    print(json.dumps(payload, indent=2))


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="JSON language server provisioning")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    doctor_parser = subparsers.add_parser("doctor", help="Check npm/node and cached install")
    doctor_parser.add_argument("--container", help="Server container directory")
    doctor_parser.add_argument("--json", action="store_true", help="Output as JSON")

    install_parser = subparsers.add_parser(
        "install", help="Install the latest server, falling back to the cached one"
    )
    install_parser.add_argument("--container", help="Server container directory")
    install_parser.add_argument("--json", action="store_true", help="Output as JSON")

    cached_parser = subparsers.add_parser("cached", help="Show the cached server binary")
    cached_parser.add_argument("--container", help="Server container directory")
    cached_parser.add_argument("--json", action="store_true", help="Output as JSON")

    config_parser = subparsers.add_parser("config", help="Print server configuration payloads")
    config_parser.add_argument("--workspace", help="Workspace root")
    config_parser.add_argument(
        "--experimental", action="store_true", help="Build the experimental-mode settings schema"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "doctor":
        anyio.run(_doctor, args)

    elif args.command == "install":
        sys.exit(anyio.run(_install, args))

    elif args.command == "cached":
        sys.exit(anyio.run(_cached, args))

    elif args.command == "config":
        _config(args)

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
