"""Host capabilities consumed by the JSON language server adapter.

The host editor owns its settings store, action registry and language list.
The adapter only sees them through these protocols, and reads them on every
call rather than holding on to a snapshot.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PackageTransport(Protocol):
    """Installs packages and reports the runtime that executes them."""

    async def latest_version(self, package_name: str) -> str:
        """Return the latest published version of *package_name*."""
        ...

    async def install(self, packages: Sequence[tuple[str, str]], directory: Path) -> None:
        """Install ``(name, version)`` pairs into *directory*."""
        ...

    async def binary_path(self) -> Path:
        """Return the runtime executable able to run installed packages."""
        ...


@runtime_checkable
class SettingsStore(Protocol):
    def json_schema(self, language_names: Sequence[str], experimental: bool) -> dict[str, Any]:
        """Generate the JSON schema of the host settings file."""
        ...


@runtime_checkable
class ActionRegistry(Protocol):
    def all_action_names(self) -> Sequence[str]:
        """Names of every currently registered action."""
        ...


@runtime_checkable
class HostContext(Protocol):
    """Per-call view of the host state needed to build workspace configuration."""

    settings_store: SettingsStore
    action_registry: ActionRegistry

    def is_experimental_mode(self) -> bool:
        ...

    def language_names(self) -> Sequence[str]:
        ...


@dataclass
class StaticSettingsStore:
    """Settings store producing a schema with one entry per known language."""

    base_schema: dict[str, Any] = field(
        default_factory=lambda: {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "title": "Settings",
            "type": "object",
        }
    )

    def json_schema(self, language_names: Sequence[str], experimental: bool) -> dict[str, Any]:
        schema = dict(self.base_schema)
        properties = dict(schema.get("properties", {}))
        properties["languages"] = {
            "type": "object",
            "properties": {name: {"type": "object"} for name in language_names},
            "additionalProperties": False,
        }
        if experimental:
            properties["experimental"] = {"type": "object"}
        schema["properties"] = properties
        return schema


@dataclass
class StaticActionRegistry:
    action_names: list[str] = field(default_factory=list)

    def all_action_names(self) -> Sequence[str]:
        return list(self.action_names)


@dataclass
class StaticHostContext:
    """Fixed host state, used by the CLI and tests."""

    settings_store: SettingsStore = field(default_factory=StaticSettingsStore)
    action_registry: ActionRegistry = field(default_factory=StaticActionRegistry)
    experimental: bool = False
    languages: list[str] = field(default_factory=lambda: ["JSON"])

    def is_experimental_mode(self) -> bool:
        return self.experimental

    def language_names(self) -> Sequence[str]:
        return list(self.languages)
