"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself takes every value as an argument; only the session
and the storage factory read settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Flat-file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the three ledger CSV files"
    )

    # File names within the data directory
    accounts_file: str = Field(
        default="accounts.csv",
        description="File name for accounts"
    )
    movements_file: str = Field(
        default="transactions.csv",
        description="File name for money movements"
    )
    categories_file: str = Field(
        default="categories.csv",
        description="File name for budget categories"
    )

    # Currency used when nothing more specific is known
    default_currency: str = Field(
        default="USD",
        description="Currency assumed for movements whose account is missing"
    )
    budget_currency: str = Field(
        default="USD",
        description="Currency of category 'assigned' amounts"
    )

    @field_validator("default_currency", "budget_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case."""
        v = v.strip().upper()
        if not v:
            raise ValueError("Currency code cannot be empty")
        return v

    @field_validator("accounts_file", "movements_file", "categories_file")
    @classmethod
    def plain_file_name(cls, v: str) -> str:
        """File names must not point outside the data directory."""
        if not v or Path(v).name != v:
            raise ValueError(f"Expected a bare file name, got: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (False = human-readable console output)"
    )

    # Persistence retry policy (applied by the session, never by the store)
    persist_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times the session tries to persist a ledger"
    )
    persist_retry_min_wait: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum backoff between persist attempts (seconds)"
    )
    persist_retry_max_wait: float = Field(
        default=5.0,
        ge=0.0,
        description="Maximum backoff between persist attempts (seconds)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @model_validator(mode="after")
    def validate_wait_bounds(self) -> "AppSettings":
        if self.persist_retry_max_wait < self.persist_retry_min_wait:
            raise ValueError("persist_retry_max_wait cannot be below persist_retry_min_wait")
        return self


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries for the ones that failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
