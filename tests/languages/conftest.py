"""Shared fixtures for language adapter tests."""

import pytest

from jsonls.host import StaticActionRegistry, StaticHostContext
from jsonls.languages.json_lsp_plugin import JsonLspAdapter


@pytest.fixture
def json_adapter(fake_transport):
    return JsonLspAdapter(fake_transport)


@pytest.fixture
def host_context():
    """Host with a handful of actions and languages."""
    return StaticHostContext(
        action_registry=StaticActionRegistry(["editor::Copy", "editor::Paste", "pane::Split"]),
        languages=["JSON", "Python", "Rust"],
    )
