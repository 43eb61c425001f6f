"""Global settings instance for InvoiceBox.

This module provides a unified settings object that combines:
- Configuration from config.toml
- Secrets from secrets.env
- Environment variable overrides
"""

import logging
import secrets as secrets_module
from pathlib import Path

from invoicebox.config.loader import load_config, load_secrets
from invoicebox.config.schema import InvoiceboxConfig, SecretsConfig

logger = logging.getLogger(__name__)


class Settings:
    """Unified settings object combining config and secrets.

    Exposes a flat read-only interface over the structured
    InvoiceboxConfig and SecretsConfig.
    """

    def __init__(
        self,
        config: InvoiceboxConfig | None = None,
        secrets: SecretsConfig | None = None,
    ):
        """Initialize settings.

        Args:
            config: Optional InvoiceboxConfig instance. If not provided, loads from file.
            secrets: Optional SecretsConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()
        self._secrets = secrets or load_secrets()

        if not self._secrets.secret_key:
            self._secrets.secret_key = secrets_module.token_urlsafe(32)
            logger.warning(
                "SECURITY WARNING: No secret key configured. "
                "A random secret key has been generated. JWT tokens will be invalidated "
                "when the server restarts. Set INVOICEBOX_SECRET_KEY for production use."
            )

    # Application
    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    @property
    def workers(self) -> int:
        return self._config.server.workers

    @property
    def enforce_https(self) -> bool:
        return self._config.server.enforce_https

    @property
    def rate_limit_per_minute(self) -> int:
        return self._config.server.rate_limit_per_minute

    @property
    def cors_origins(self) -> list[str]:
        return self._config.server.cors_origins

    # Database
    @property
    def mongodb_url(self) -> str:
        return self._config.database.mongodb_url

    @property
    def mongodb_database(self) -> str:
        return self._config.database.mongodb_database

    @property
    def min_pool_size(self) -> int:
        return self._config.database.min_pool_size

    @property
    def max_pool_size(self) -> int:
        return self._config.database.max_pool_size

    # Storage
    @property
    def data_dir(self) -> Path:
        return self._config.storage.data_dir

    @property
    def log_dir(self) -> Path:
        return self._config.storage.log_dir

    @property
    def uploads_dir(self) -> Path:
        return self._config.storage.uploads_dir

    @property
    def max_upload_size_bytes(self) -> int:
        return self._config.storage.max_upload_bytes

    @property
    def max_logo_size_bytes(self) -> int:
        return self._config.storage.max_logo_bytes

    # Imports
    @property
    def import_debug_log(self) -> bool:
        return self._config.imports.debug_log

    # Auth
    @property
    def token_expire_minutes(self) -> int:
        return self._config.auth.token_expire_minutes

    @property
    def auth_rate_limit_per_minute(self) -> int:
        return self._config.auth.auth_rate_limit_per_minute

    # Email
    @property
    def email_backend(self) -> str:
        return self._config.email.backend

    @property
    def email_sender(self) -> str:
        return self._config.email.from_address

    @property
    def email_sender_name(self) -> str:
        return self._config.email.from_name

    @property
    def frontend_url(self) -> str:
        return self._config.email.frontend_url

    @property
    def aws_region(self) -> str:
        return self._config.email.aws_region

    # Reminders
    @property
    def reminders_enabled(self) -> bool:
        return self._config.reminders.enabled

    @property
    def reminders_run_hour(self) -> int:
        return self._config.reminders.run_hour

    # Secrets
    @property
    def secret_key(self) -> str:
        return self._secrets.secret_key or ""

    @property
    def aws_access_key_id(self) -> str | None:
        return self._secrets.aws_access_key_id

    @property
    def aws_secret_access_key(self) -> str | None:
        return self._secrets.aws_secret_access_key


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    The settings are loaded once and cached for subsequent calls.

    Returns:
        The global Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance so the next access reloads it."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
