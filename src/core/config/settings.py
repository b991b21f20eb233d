# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
Governance Console. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PASSWORD = "governance_central_password"


class CentralDatabaseSettings(BaseSettings):
    """Central database configuration.

    The central database stores:
    - Super-Admin accounts (seeded out-of-band)
    - Tenants and their single tenant-admin user
    - Global rule versions
    - The governance audit trail

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        name: Database name.
        ssl: Whether to require TLS for the connection.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        url_override: Full async URL, used instead of the components when set.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "governance"
    password: SecretStr = SecretStr(DEFAULT_DB_PASSWORD)
    host: str = "localhost"
    port: int = 5432
    name: str = "governance_central"
    ssl: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    url_override: str | None = Field(default=None, validation_alias="DATABASE_URL")

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        url = f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"
        if self.ssl:
            url += "?ssl=require"
        return url


class EmailSettings(BaseSettings):
    """SMTP configuration for tenant-admin invitation emails.

    When user or password is empty, invitations are emitted to the
    console instead of being delivered.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port.
        secure: Use implicit TLS (port 465) instead of STARTTLS.
        user: SMTP authentication username.
        password: SMTP authentication password.
        from_address: Sender header.
        platform_url: Tenant Platform URL included in invitations.
        timeout: SMTP timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        extra="ignore",
    )

    host: str = "smtp.gmail.com"
    port: int = 587
    secure: bool = False
    user: str = ""
    password: SecretStr = SecretStr("")
    from_address: str = Field(
        default="Governance Console <noreply@governance.local>",
        validation_alias="EMAIL_FROM",
    )
    platform_url: str = "https://tenant.governance.local"
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        """Check whether SMTP credentials are present."""
        return bool(self.user and self.password.get_secret_value())


class SecuritySettings(BaseSettings):
    """Password hashing configuration.

    Attributes:
        tenant_admin_hash_rounds: bcrypt work factor for tenant-admin credentials.
        seed_hash_rounds: bcrypt work factor for administrative seeding only.
    """

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_",
        extra="ignore",
    )

    tenant_admin_hash_rounds: int = 12
    seed_hash_rounds: int = 10


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        central_db: Central database settings.
        email: Invitation email settings.
        security: Password hashing settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    central_db: CentralDatabaseSettings = Field(default_factory=CentralDatabaseSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if (
                self.central_db.url_override is None
                and self.central_db.password.get_secret_value() == DEFAULT_DB_PASSWORD
            ):
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DB_PASSWORD environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
