"""Global pytest fixtures for deterministic test behavior."""

from pathlib import Path

import pytest

from jsonls.lsp_setup import SERVER_PATH


class FakeTransport:
    """In-memory package transport that records every call.

    ``install`` writes the server entry point so installs look real on disk.
    """

    def __init__(
        self,
        version: object = "1.2.3",
        runtime: Path = Path("/opt/node/bin/node"),
    ) -> None:
        self.version = version
        self.runtime = runtime
        self.latest_calls: list[str] = []
        self.install_calls: list[tuple[list[tuple[str, str]], Path]] = []
        self.runtime_calls = 0
        self.latest_error: Exception | None = None
        self.install_error: Exception | None = None
        self.runtime_error: Exception | None = None
        self.write_entry_point = True

    async def latest_version(self, package_name: str) -> str:
        self.latest_calls.append(package_name)
        if self.latest_error is not None:
            raise self.latest_error
        return self.version  # type: ignore[return-value]

    async def install(self, packages, directory: Path) -> None:
        self.install_calls.append((list(packages), Path(directory)))
        if self.install_error is not None:
            raise self.install_error
        if self.write_entry_point:
            server_path = Path(directory) / SERVER_PATH
            server_path.parent.mkdir(parents=True, exist_ok=True)
            server_path.write_text("#!/usr/bin/env node\n")

    async def binary_path(self) -> Path:
        self.runtime_calls += 1
        if self.runtime_error is not None:
            raise self.runtime_error
        return self.runtime


def write_install(container: Path, version: str) -> Path:
    """Lay out a valid install for *version* under *container*."""
    server_path = container / version / SERVER_PATH
    server_path.parent.mkdir(parents=True, exist_ok=True)
    server_path.write_text("#!/usr/bin/env node\n")
    return server_path


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def make_install():
    return write_install


@pytest.fixture(autouse=True)
def _isolated_host_dirs(monkeypatch, tmp_path_factory):
    """Point host config/data roots at a throwaway directory.

    Keeps tests away from the real ``~/.config`` and npm/node overrides.
    """
    root = tmp_path_factory.mktemp("jsonls_home")
    monkeypatch.setenv("JSONLS_CONFIG_DIR", str(root / "config" / "jsonls"))
    monkeypatch.setenv("JSONLS_DATA_DIR", str(root / "data"))
    for var in ("JSONLS_NPM_COMMAND", "JSONLS_NODE_COMMAND", "JSONLS_NPM_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    return root
