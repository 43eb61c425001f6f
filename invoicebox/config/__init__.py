"""InvoiceBox configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/invoicebox/config.toml (user config)
4. /opt/invoicebox/config.toml (production install)
5. /etc/invoicebox/config.toml (system config)

Secrets are loaded from secrets.env files in the same directories.
"""

from invoicebox.config.schema import (
    AuthConfig,
    DatabaseConfig,
    EmailConfig,
    ImportConfig,
    InvoiceboxConfig,
    RemindersConfig,
    SecretsConfig,
    ServerConfig,
    StorageConfig,
)
from invoicebox.config.settings import Settings, get_settings, reset_settings, settings

__all__ = [
    "AuthConfig",
    "DatabaseConfig",
    "EmailConfig",
    "ImportConfig",
    "InvoiceboxConfig",
    "RemindersConfig",
    "SecretsConfig",
    "ServerConfig",
    "Settings",
    "StorageConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
