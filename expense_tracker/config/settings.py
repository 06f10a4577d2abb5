"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so the database connection and the
logging switches can be read from one place and validated at startup.
"""

from functools import lru_cache
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DatabaseSettings(BaseSettings):
    """
    Relational database configuration.

    Either provide a complete SQLAlchemy URL through EXPENSES_DB_URL, or the
    individual parts (at minimum the database name).
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    name: str = Field(
        default="expenses",
        min_length=1,
        description="Database name"
    )
    host: Optional[str] = Field(
        default=None,
        description="Database host (empty = local socket)"
    )
    port: Optional[int] = Field(
        default=None,
        ge=1,
        le=65535,
        description="Database port"
    )
    user: Optional[str] = Field(
        default=None,
        description="Database user"
    )
    password: Optional[str] = Field(
        default=None,
        description="Database password"
    )
    driver: str = Field(
        default="postgresql+psycopg2",
        description="SQLAlchemy driver name"
    )
    url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the individual parts"
    )

    # Startup connection retries; a single attempt fails fast
    connect_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="How many times to try connecting before giving up"
    )

    @field_validator('url')
    @classmethod
    def empty_url_is_unset(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty EXPENSES_DB_URL as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def sqlalchemy_url(self) -> Union[str, URL]:
        """URL handed to sqlalchemy.create_engine."""
        if self.url:
            return self.url
        return URL.create(
            drivername=self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging on stderr"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
