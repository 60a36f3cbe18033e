"""Language server adapters."""

from .base import BaseLspAdapter, LanguageServerBinary, LspAdapter, VersionToken

__all__ = [
    "BaseLspAdapter",
    "LanguageServerBinary",
    "LspAdapter",
    "VersionToken",
]
