"""
Configuration Management for Placebi

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Nothing in this file is required: every setting has a default so the
app runs out of the box on a laptop.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where and how the state blob is persisted."""

    model_config = SettingsConfigDict(
        env_prefix="PLACEBI_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".placebi"),
        description="Directory holding the state blob"
    )
    storage_key: str = Field(
        default="placebi-storage",
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Key (file stem) of the state blob"
    )
    write_retries: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Attempts before a failed write is reported"
    )

    @property
    def blob_path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLACEBI_",
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
    log_level: str = Field(
        default="INFO",
        description="Minimum level written to the structured log"
    )

    # Currency
    default_currency: str = Field(
        default="XOF",
        description="Currency preselected by the setup wizard"
    )
    supported_currencies: str = Field(
        default="XOF,EUR,USD,XAF",
        description="Comma-separated list of currencies offered at setup"
    )

    # Validation thresholds
    max_entry_amount: float = Field(
        default=100_000_000.0,
        gt=0,
        description="Amounts above this are flagged as suspicious (warning only)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @property
    def effective_log_level(self) -> str:
        """debug_mode forces DEBUG regardless of log_level."""
        return "DEBUG" if self.debug_mode else self.log_level

    @property
    def supported_currencies_list(self) -> list[str]:
        """Get supported currencies as a list."""
        return [
            code.strip().upper()
            for code in self.supported_currencies.split(",")
            if code.strip()
        ]


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

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
