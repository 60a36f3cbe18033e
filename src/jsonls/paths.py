"""Well-known host paths and schema file-match helpers."""

from __future__ import annotations

import os
from pathlib import Path, PurePath

CONFIG_DIR_ENV_VAR = "JSONLS_CONFIG_DIR"
DATA_DIR_ENV_VAR = "JSONLS_DATA_DIR"

SETTINGS_FILENAME = "settings.json"
KEYMAP_FILENAME = "keymap.json"
LOCAL_SETTINGS_RELATIVE_PATH = ".jsonls/settings.json"
LANGUAGES_DIRNAME = "languages"


def _env_dir(env_var: str, default: Path) -> Path:
    """Resolve a directory from an env override, falling back to *default*."""
    value = os.getenv(env_var, "")
    if value.strip():
        return Path(value).expanduser()
    return default


def config_dir() -> Path:
    """Host configuration root holding the user settings and keymap."""
    return _env_dir(CONFIG_DIR_ENV_VAR, Path.home() / ".config" / "jsonls")


def data_dir() -> Path:
    """Host data root under which language servers are installed."""
    return _env_dir(DATA_DIR_ENV_VAR, Path.home() / ".local" / "share" / "jsonls")


def settings_path() -> Path:
    return config_dir() / SETTINGS_FILENAME


def keymap_path() -> Path:
    return config_dir() / KEYMAP_FILENAME


def languages_dir() -> Path:
    """Root of the per-server container directories."""
    return data_dir() / LANGUAGES_DIRNAME


def container_dir_for(server_name: str) -> Path:
    """Container directory for one language server, keyed by its name."""
    return languages_dir() / server_name


def schema_file_match(path: str | PurePath) -> str:
    """Strip the grandparent prefix from *path*.

    ``/a/b/c/settings.json`` becomes ``c/settings.json``, so the server can match
    host files regardless of where the host configuration root lives.
    Raises ValueError when *path* has fewer than two ancestors.
    """
    pure = PurePath(path)
    ancestors = pure.parents
    if len(ancestors) < 2:
        raise ValueError(f"path {str(pure)!r} has fewer than two ancestor directories")
    return pure.relative_to(ancestors[1]).as_posix()
