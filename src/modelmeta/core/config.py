"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: MODELMETA_
    """

    model_config = SettingsConfigDict(
        env_prefix="MODELMETA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Naming
    singular_table: bool = Field(
        default=False,
        description="Use singular table names (user instead of users)",
    )

    # Dialect
    dialect: str = Field(
        default="postgres",
        description="Target database dialect: postgres, mysql or sqlite",
    )
    default_string_size: int = Field(
        default=255,
        description="Column size used when a field carries no SIZE tag",
    )

    # Logging
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
