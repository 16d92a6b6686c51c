# src/currex/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Connection parameters, cache windows and the shared widget store location
are read from environment variables (or a .env file) with validation.

Files that USE this module:
- currex.app (builds clients, caches and the widget store from settings)
- currex.adapters.providers.base (default base URL, credentials and timeout)
- currex.adapters.providers.current_rates / historical_rates (cache TTLs)

Files that this module USES:
- currex.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional, Tuple  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from currex.shared.validators import (
    validate_base_url,  # Validate API base URL format
    validate_credentials,  # Validate user:pass credentials format
    validate_currency_code,  # Validate ISO currency codes
)


def _split_csv(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Rates API ---
    # Empty values are allowed here; clients raise ConfigurationError instead
    api_base_url: str = Field(default="", alias="CURREX_API_BASE_URL")
    api_username: str = Field(default="", alias="CURREX_API_USERNAME")
    api_password: str = Field(default="", alias="CURREX_API_PASSWORD")
    api_credentials: str = Field(default="", alias="CURREX_API_CREDENTIALS")  # "user:pass"

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=20, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Cache Settings (in seconds) ---
    current_cache_seconds: int = Field(default=300, alias="CURRENT_CACHE_SECONDS", ge=1, le=86400)
    historical_cache_seconds: int = Field(default=1800, alias="HISTORICAL_CACHE_SECONDS", ge=1, le=86400)

    # --- Rates selection ---
    currencies_csv: str = Field(default="USD,EUR", alias="CURREX_CURRENCIES")
    banks_csv: str = Field(default="", alias="CURREX_BANKS")  # empty = discover from responses

    # --- Widget handoff ---
    shared_store_dir: Path = Field(default=Path("./data/shared"), alias="SHARED_STORE_DIR")

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="CURREX_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def basic_credentials(self) -> str:
        """
        Credentials as 'user:pass' for HTTP Basic auth.

        CURREX_API_CREDENTIALS wins over the separate username/password pair.
        Returns an empty string when nothing is configured.
        """
        if self.api_credentials:
            return self.api_credentials
        if self.api_username:
            return f"{self.api_username}:{self.api_password}"
        return ""

    @property
    def currencies(self) -> Tuple[str, ...]:
        return _split_csv(self.currencies_csv)

    @property
    def banks(self) -> Optional[Tuple[str, ...]]:
        """Fixed bank order, or None to discover banks from each response."""
        banks = _split_csv(self.banks_csv)
        return banks or None

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL format and drop a trailing slash."""
        v = v.strip()
        if v and not validate_base_url(v):
            raise ValueError("CURREX_API_BASE_URL must be an absolute http(s) URL")
        return v.rstrip("/")

    @field_validator("api_credentials")
    @classmethod
    def validate_credentials(cls, v: str) -> str:
        """Validate credentials format."""
        if v and not validate_credentials(v):
            raise ValueError("CURREX_API_CREDENTIALS must look like 'user:password'")
        return v

    @field_validator("currencies_csv")
    @classmethod
    def validate_currencies(cls, v: str) -> str:
        """Validate and normalize currency codes."""
        codes = [code.upper() for code in _split_csv(v)]
        if not codes:
            raise ValueError("CURREX_CURRENCIES must list at least one currency")
        for code in codes:
            if not validate_currency_code(code):
                raise ValueError(f"Invalid currency code: {code!r}")
        return ",".join(codes)


# Global settings instance
settings = Settings()
