"""Typed provisioning errors."""

from __future__ import annotations


class ProvisioningError(RuntimeError):
    """Base error for JSON language server provisioning."""


class UpstreamUnavailable(ProvisioningError):
    """Latest-version lookup failed (registry unreachable or malformed reply)."""


class InstallFailed(ProvisioningError):
    """Package installation into the container directory failed."""


class RuntimeUnavailable(ProvisioningError):
    """The package transport could not report its runtime executable."""


class ServerUnavailable(ProvisioningError):
    """Neither a fresh install nor a cached install could be used."""


class TransportError(RuntimeError):
    """npm/node command execution failed."""
