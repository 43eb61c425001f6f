"""Configuration loader for InvoiceBox.

Loads configuration from TOML files and secrets from .env files.
Environment variables can override any configuration value.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from invoicebox.config.schema import InvoiceboxConfig, SecretsConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "INVOICEBOX"


def _search_paths(filename: str) -> list[Path]:
    return [
        # Project root (current working directory)
        Path.cwd() / filename,
        # User config directory
        Path.home() / ".config" / "invoicebox" / filename,
        # Production install directory
        Path("/opt/invoicebox") / filename,
        # System config (Linux FHS)
        Path("/etc/invoicebox") / filename,
    ]


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/invoicebox/config.toml (user config)
    3. /opt/invoicebox/config.toml (production install)
    4. /etc/invoicebox/config.toml (system config)
    """
    return _search_paths("config.toml")


def get_secrets_search_paths() -> list[Path]:
    """Get the list of paths to search for secrets files, same order as config."""
    return _search_paths("secrets.env")


def _first_existing(paths: list[Path]) -> Path | None:
    for path in paths:
        if path.exists() and path.is_file():
            logger.debug("Found file: %s", path)
            return path
    return None


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    return _first_existing(get_config_search_paths())


def find_secrets_file() -> Path | None:
    """Find the first existing secrets file from search paths."""
    return _first_existing(get_secrets_search_paths())


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


# Environment variable -> (section, key)
ENV_MAPPINGS: dict[str, tuple[str, str]] = {
    # Server
    "SERVER_HOST": ("server", "host"),
    "SERVER_PORT": ("server", "port"),
    "SERVER_WORKERS": ("server", "workers"),
    "SERVER_DEBUG": ("server", "debug"),
    "DEBUG": ("server", "debug"),  # Shorthand
    "HOST": ("server", "host"),  # Shorthand
    "PORT": ("server", "port"),  # Shorthand
    # Database
    "DATABASE_MONGODB_URL": ("database", "mongodb_url"),
    "DATABASE_MONGODB_DATABASE": ("database", "mongodb_database"),
    "MONGODB_URL": ("database", "mongodb_url"),  # Shorthand
    "MONGODB_DATABASE": ("database", "mongodb_database"),  # Shorthand
    # Storage
    "STORAGE_DATA_DIR": ("storage", "data_dir"),
    "STORAGE_LOG_DIR": ("storage", "log_dir"),
    "STORAGE_MAX_UPLOAD_MB": ("storage", "max_upload_mb"),
    "STORAGE_MAX_LOGO_MB": ("storage", "max_logo_mb"),
    # Imports
    "IMPORTS_DEBUG_LOG": ("imports", "debug_log"),
    # Auth
    "AUTH_TOKEN_EXPIRE_MINUTES": ("auth", "token_expire_minutes"),
    # Email
    "EMAIL_BACKEND": ("email", "backend"),
    "EMAIL_FROM_ADDRESS": ("email", "from_address"),
    "EMAIL_AWS_REGION": ("email", "aws_region"),
    "FRONTEND_URL": ("email", "frontend_url"),
    # Reminders
    "REMINDERS_ENABLED": ("reminders", "enabled"),
    "REMINDERS_RUN_HOUR": ("reminders", "run_hour"),
}

INT_KEYS = {
    "port",
    "workers",
    "max_upload_mb",
    "max_logo_mb",
    "token_expire_minutes",
    "run_hour",
}

BOOL_KEYS = {"debug", "enforce_https", "debug_log", "enabled"}


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = ENV_PREFIX) -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - INVOICEBOX_SERVER_HOST -> config_dict["server"]["host"]
    - INVOICEBOX_DATABASE_MONGODB_URL -> config_dict["database"]["mongodb_url"]
    - etc.

    Note: This modifies config_dict in place.
    """
    for suffix, (section, key) in ENV_MAPPINGS.items():
        value = os.environ.get(f"{prefix}_{suffix}")
        if value is None:
            continue

        section_dict = config_dict.setdefault(section, {})
        if key in INT_KEYS:
            section_dict[key] = int(value)
        elif key in BOOL_KEYS:
            section_dict[key] = value.lower() in ("true", "1", "yes")
        else:
            section_dict[key] = value


# secrets.env / environment key -> SecretsConfig field
SECRET_KEYS: dict[str, str] = {
    f"{ENV_PREFIX}_SECRET_KEY": "secret_key",
    "AWS_ACCESS_KEY_ID": "aws_access_key_id",
    "AWS_SECRET_ACCESS_KEY": "aws_secret_access_key",
}


def load_secrets(secrets_file: Path | None = None) -> SecretsConfig:
    """Load secrets from environment variables and optional secrets.env file.

    Environment variables take precedence over file values.
    """
    secrets_dict: dict[str, str | None] = {}

    if secrets_file is None:
        secrets_file = find_secrets_file()

    if secrets_file and secrets_file.exists():
        logger.info("Loading secrets from: %s", secrets_file)
        file_secrets = dotenv_values(secrets_file)
        for file_key, config_key in SECRET_KEYS.items():
            if file_secrets.get(file_key):
                secrets_dict[config_key] = file_secrets[file_key]

    for env_var, config_key in SECRET_KEYS.items():
        value = os.environ.get(env_var)
        if value:
            secrets_dict[config_key] = value

    return SecretsConfig(**secrets_dict)


def load_config(config_file: Path | None = None) -> InvoiceboxConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        InvoiceboxConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return InvoiceboxConfig(**config_dict)
