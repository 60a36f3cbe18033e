"""JSON language adapter backed by vscode-json-languageserver."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .. import paths
from ..host import HostContext, PackageTransport
from ..lsp_setup import SERVER_PACKAGE, ensure_binary, find_cached, latest_version
from ._keymap_schema import keymap_json_schema
from .base import BaseLspAdapter, LanguageServerBinary, VersionToken


def initialization_options() -> dict[str, Any]:
    """Static options sent with the ``initialize`` request."""
    return {"provideFormatter": True}


def workspace_configuration(workspace_root: Path, host: HostContext) -> dict[str, Any]:
    """Build the ``json`` section answered to ``workspace/configuration``.

    Host state is read on every call. The two schema bindings are ordered:
    settings first, keymap second.
    """
    del workspace_root
    action_names = list(host.action_registry.all_action_names())
    experimental = bool(host.is_experimental_mode())
    language_names = list(host.language_names())
    settings_schema = host.settings_store.json_schema(language_names, experimental)

    return {
        "json": {
            "format": {
                "enable": True,
            },
            "schemas": [
                {
                    "fileMatch": [
                        paths.schema_file_match(paths.settings_path()),
                        paths.LOCAL_SETTINGS_RELATIVE_PATH,
                    ],
                    "schema": settings_schema,
                },
                {
                    "fileMatch": [paths.schema_file_match(paths.keymap_path())],
                    "schema": keymap_json_schema(action_names),
                },
            ],
        }
    }


class JsonLspAdapter(BaseLspAdapter):
    """Provision and configure the JSON language server through a package transport."""

    SERVER_NAME = "json-language-server"
    SHORT_NAME = "json"
    LANGUAGE_IDS = {"JSON": "jsonc"}

    def __init__(self, transport: PackageTransport) -> None:
        self._transport = transport

    def name(self) -> str:
        return self.SERVER_NAME

    def short_name(self) -> str:
        return self.SHORT_NAME

    async def fetch_latest_server_version(self) -> VersionToken:
        return await latest_version(self._transport, SERVER_PACKAGE)

    async def fetch_server_binary(
        self, version: VersionToken, container_dir: Path
    ) -> LanguageServerBinary:
        return await ensure_binary(self._transport, version, container_dir, SERVER_PACKAGE)

    async def cached_server_binary(self, container_dir: Path) -> LanguageServerBinary | None:
        return await find_cached(container_dir, self._transport)

    async def installation_test_binary(self, container_dir: Path) -> LanguageServerBinary | None:
        return await find_cached(container_dir, self._transport)

    def initialization_options(self) -> dict[str, Any] | None:
        return initialization_options()

    def workspace_configuration(self, workspace_root: Path, host: HostContext) -> dict[str, Any]:
        return workspace_configuration(workspace_root, host)

    def language_ids(self) -> dict[str, str]:
        return dict(self.LANGUAGE_IDS)
