"""Tests for the JSON language server adapter and its configuration payloads."""

from pathlib import Path

import pytest

from jsonls import paths
from jsonls.host import StaticActionRegistry, StaticHostContext
from jsonls.languages.base import BaseLspAdapter, LspAdapter
from jsonls.languages.json_lsp_plugin import (
    JsonLspAdapter,
    initialization_options,
    workspace_configuration,
)
from jsonls.lsp_setup import SERVER_PACKAGE, SERVER_PATH


class _CountingHost(StaticHostContext):
    """Host that counts how often the adapter reads its state."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.mode_reads = 0
        self.language_reads = 0

    def is_experimental_mode(self) -> bool:
        self.mode_reads += 1
        return super().is_experimental_mode()

    def language_names(self):
        self.language_reads += 1
        return super().language_names()


class TestAdapterSurface:
    def test_satisfies_protocol(self, json_adapter):
        assert isinstance(json_adapter, LspAdapter)
        assert isinstance(json_adapter, BaseLspAdapter)

    def test_names(self, json_adapter):
        assert json_adapter.name() == "json-language-server"
        assert json_adapter.short_name() == "json"

    def test_language_ids(self, json_adapter):
        assert json_adapter.language_ids() == {"JSON": "jsonc"}

    def test_language_ids_are_a_copy(self, json_adapter):
        json_adapter.language_ids()["YAML"] = "yaml"
        assert json_adapter.language_ids() == {"JSON": "jsonc"}

    @pytest.mark.asyncio
    async def test_fetch_latest_server_version(self, json_adapter, fake_transport):
        version = await json_adapter.fetch_latest_server_version()
        assert version.value == "1.2.3"
        assert fake_transport.latest_calls == [SERVER_PACKAGE]

    @pytest.mark.asyncio
    async def test_fetch_server_binary(self, json_adapter, tmp_path):
        version = await json_adapter.fetch_latest_server_version()
        binary = await json_adapter.fetch_server_binary(version, tmp_path)
        assert binary.command() == ["/opt/node/bin/node", str(tmp_path / SERVER_PATH), "--stdio"]

    @pytest.mark.asyncio
    async def test_installation_test_binary_matches_cache(
        self, json_adapter, tmp_path, make_install
    ):
        make_install(tmp_path, "1.2.3")
        cached = await json_adapter.cached_server_binary(tmp_path)
        assert cached is not None
        assert await json_adapter.installation_test_binary(tmp_path) == cached

    @pytest.mark.asyncio
    async def test_fresh_container_has_no_cached_binary(self, json_adapter, tmp_path):
        assert await json_adapter.cached_server_binary(tmp_path) is None
        assert await json_adapter.installation_test_binary(tmp_path) is None


class TestInitializationOptions:
    def test_provides_formatter(self, json_adapter):
        assert json_adapter.initialization_options() == {"provideFormatter": True}

    def test_constant_across_calls(self):
        first = initialization_options()
        first["provideFormatter"] = False
        assert initialization_options() == {"provideFormatter": True}


class TestWorkspaceConfiguration:
    def test_shape(self, json_adapter, host_context, tmp_path):
        config = json_adapter.workspace_configuration(tmp_path, host_context)

        assert config["json"]["format"] == {"enable": True}
        schemas = config["json"]["schemas"]
        assert len(schemas) == 2
        assert schemas[0]["fileMatch"] == ["jsonls/settings.json", ".jsonls/settings.json"]
        assert schemas[1]["fileMatch"] == ["jsonls/keymap.json"]

    def test_settings_schema_comes_from_store(self, host_context, tmp_path):
        config = workspace_configuration(tmp_path, host_context)
        settings_schema = config["json"]["schemas"][0]["schema"]

        assert set(settings_schema["properties"]["languages"]["properties"]) == {
            "JSON",
            "Python",
            "Rust",
        }
        assert "experimental" not in settings_schema["properties"]

    def test_experimental_flag_reaches_settings_store(self, tmp_path):
        host = StaticHostContext(experimental=True)
        settings_schema = workspace_configuration(tmp_path, host)["json"]["schemas"][0]["schema"]
        assert "experimental" in settings_schema["properties"]

    def test_keymap_schema_lists_actions(self, host_context, tmp_path):
        keymap_schema = workspace_configuration(tmp_path, host_context)["json"]["schemas"][1][
            "schema"
        ]
        action = keymap_schema["definitions"]["KeymapAction"]["anyOf"][0]
        assert action["enum"] == ["editor::Copy", "editor::Paste", "pane::Split"]

    @pytest.mark.parametrize(
        ("actions", "languages"),
        [([], []), (["a"], ["JSON"]), ([f"action::{i}" for i in range(200)], ["L"] * 50)],
    )
    def test_always_two_bindings_in_fixed_order(self, tmp_path, actions, languages):
        host = StaticHostContext(
            action_registry=StaticActionRegistry(actions), languages=languages
        )

        schemas = workspace_configuration(tmp_path, host)["json"]["schemas"]

        assert len(schemas) == 2
        assert schemas[0]["fileMatch"][0].endswith(paths.SETTINGS_FILENAME)
        assert schemas[1]["fileMatch"][0].endswith(paths.KEYMAP_FILENAME)

    def test_host_state_is_read_on_every_call(self, tmp_path):
        registry = StaticActionRegistry(["editor::Copy"])
        host = _CountingHost(action_registry=registry)

        first = workspace_configuration(tmp_path, host)
        registry.action_names.append("editor::Cut")
        host.experimental = True
        second = workspace_configuration(tmp_path, host)

        assert host.mode_reads == 2
        assert host.language_reads == 2
        first_actions = first["json"]["schemas"][1]["schema"]["definitions"]["KeymapAction"]
        second_actions = second["json"]["schemas"][1]["schema"]["definitions"]["KeymapAction"]
        assert first_actions["anyOf"][0]["enum"] == ["editor::Copy"]
        assert second_actions["anyOf"][0]["enum"] == ["editor::Copy", "editor::Cut"]
        assert "experimental" in second["json"]["schemas"][0]["schema"]["properties"]

    def test_file_match_follows_config_dir(self, monkeypatch, host_context, tmp_path):
        monkeypatch.setenv("JSONLS_CONFIG_DIR", str(tmp_path / "Library" / "Editor"))

        schemas = workspace_configuration(Path("/ws"), host_context)["json"]["schemas"]

        assert schemas[0]["fileMatch"][0] == "Editor/settings.json"
        assert schemas[1]["fileMatch"] == ["Editor/keymap.json"]


def test_base_adapter_defaults(tmp_path):
    adapter = BaseLspAdapter()
    assert adapter.initialization_options() is None
    assert adapter.workspace_configuration(tmp_path, StaticHostContext()) == {}
    assert adapter.language_ids() == {}
    with pytest.raises(NotImplementedError):
        adapter.name()
