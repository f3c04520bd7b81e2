"""
Configuration Settings.

This module defines the client configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class ApiConfig(BaseModel):
    """GRead REST API configuration."""

    base_url: str = Field(
        default="https://gread.fun", alias="GREAD_BASE_URL", description="Site root the /wp-json namespaces hang off"
    )
    timeout: float = Field(default=30.0, alias="GREAD_HTTP_TIMEOUT", description="Request timeout in seconds")

    model_config = {"populate_by_name": True}

    @property
    def buddypress_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/wp-json/buddypress/v1"

    @property
    def gread_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/wp-json/gread/v1"

    @property
    def jwt_auth_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/wp-json/jwt-auth/v1"

    @property
    def custom_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/wp-json/custom/v1"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", alias="GREAD_LOG_LEVEL", description="Console log level")
    format: str = Field(default="detailed", alias="GREAD_LOG_FORMAT", description="simple, detailed or json")
    enable_file: bool = Field(
        default=False, alias="GREAD_ENABLE_FILE_LOGGING", description="Also write DEBUG logs to a file"
    )
    file_dir: str = Field(default="logs", alias="GREAD_LOG_FILE_DIR", description="Directory for the log file")

    model_config = {"populate_by_name": True}


class StorageConfig(BaseModel):
    """Local preference storage configuration."""

    url: str = Field(
        default="sqlite:///gread_preferences.db",
        alias="GREAD_STORAGE_URL",
        description="'memory' or an SQLAlchemy URL for the preference table",
    )
    max_cache_size: int = Field(
        default=100 * 1024 * 1024,
        alias="GREAD_MAX_CACHE_SIZE",
        description="Default cache budget in bytes",
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Client settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # API Configuration
    # =====================================================================
    base_url: str = Field(
        default="https://gread.fun",
        description="GRead site root",
        alias="GREAD_BASE_URL",
    )
    http_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout in seconds",
        alias="GREAD_HTTP_TIMEOUT",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="GREAD_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="GREAD_LOG_FORMAT",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Write DEBUG logs to a file as well as the console",
        alias="GREAD_ENABLE_FILE_LOGGING",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory holding the log file",
        alias="GREAD_LOG_FILE_DIR",
    )

    # =====================================================================
    # Storage Configuration
    # =====================================================================
    storage_url: str = Field(
        default="sqlite:///gread_preferences.db",
        description="'memory' or an SQLAlchemy URL for local preference storage",
        alias="GREAD_STORAGE_URL",
    )
    max_cache_size: int = Field(
        default=100 * 1024 * 1024,
        ge=0,
        description="Default local cache budget in bytes",
        alias="GREAD_MAX_CACHE_SIZE",
    )

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def api(self) -> ApiConfig:
        """Get API configuration from environment variables."""
        return ApiConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration from environment variables."""
        return LoggingConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def storage(self) -> StorageConfig:
        """Get storage configuration from environment variables."""
        return StorageConfig.model_validate(self.model_dump(by_alias=True))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


settings = get_settings()
