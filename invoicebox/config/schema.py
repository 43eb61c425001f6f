"""Pydantic models for InvoiceBox configuration.

These models define the structure of config.toml and secrets.env files.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 2
    debug: bool = False
    enforce_https: bool = False
    rate_limit_per_minute: int = 60
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class DatabaseConfig(BaseModel):
    """MongoDB database configuration."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "invoicebox"
    # Connection pool settings
    min_pool_size: int = 10
    max_pool_size: int = 100


class StorageConfig(BaseModel):
    """File storage configuration."""

    data_dir: Path = Field(default_factory=lambda: Path("data"))
    log_dir: Path = Field(default_factory=lambda: Path("data/logs"))
    max_upload_mb: int = 10
    max_logo_mb: int = 5

    @property
    def uploads_dir(self) -> Path:
        """Directory for logos and temporary spreadsheet uploads."""
        return self.data_dir / "uploads"

    @property
    def max_upload_bytes(self) -> int:
        """Get max spreadsheet upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024

    @property
    def max_logo_bytes(self) -> int:
        """Get max logo size in bytes."""
        return self.max_logo_mb * 1024 * 1024


class ImportConfig(BaseModel):
    """Client import configuration."""

    # Write last_import_debug.txt into the log directory
    debug_log: bool = True


class AuthConfig(BaseModel):
    """Authentication configuration."""

    token_expire_minutes: int = 120
    auth_rate_limit_per_minute: int = 30


class EmailConfig(BaseModel):
    """Email configuration."""

    backend: Literal["console", "ses"] = "console"
    from_address: str = "billing@invoicebox.app"
    from_name: str = "InvoiceBox"
    frontend_url: str = "http://localhost:3000"
    aws_region: str = "eu-west-1"


class RemindersConfig(BaseModel):
    """Payment reminder job configuration."""

    enabled: bool = True
    # Local hour of day (0-23) at which the daily run starts
    run_hour: int = Field(default=9, ge=0, le=23)


class InvoiceboxConfig(BaseModel):
    """Main InvoiceBox configuration loaded from config.toml."""

    app_name: str = "InvoiceBox"
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    reminders: RemindersConfig = Field(default_factory=RemindersConfig)


class SecretsConfig(BaseModel):
    """Secrets loaded from secrets.env file.

    These are sensitive values that should not be stored in config.toml.
    """

    secret_key: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
