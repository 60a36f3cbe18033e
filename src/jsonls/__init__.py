"""jsonls - provisioning and configuration of the JSON language server for editor hosts."""

__version__ = "0.3.1"
