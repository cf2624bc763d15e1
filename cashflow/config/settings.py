"""
Configuration Management for Cash Flow Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets remote store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Worksheet names within the spreadsheet (one per remote table)
    profiles_sheet_name: str = Field(default="profiles")
    incomes_sheet_name: str = Field(default="incomes")
    spendings_sheet_name: str = Field(default="spendings")
    obligations_sheet_name: str = Field(default="obligations")
    assets_sheet_name: str = Field(default="assets")
    audit_sheet_name: str = Field(
        default="audit_log",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v

    def sheet_name_for(self, table: str) -> str:
        """Map a remote table name to its worksheet name."""
        return getattr(self, f"{table}_sheet_name", table)


class PriceFeedSettings(BaseSettings):
    """Spot price feed endpoints. All feeds are unauthenticated."""

    model_config = SettingsConfigDict(
        env_prefix="PRICE_FEED_",
        extra="ignore"
    )

    bitcoin_url: str = Field(
        default="https://api.coingecko.com/api/v3/simple/price?ids=bitcoin&vs_currencies=thb",
        description="BTC spot price quoted in THB"
    )
    gold_url: str = Field(
        default="https://api.gold-api.com/price/XAU",
        description="Gold spot price in USD per troy ounce"
    )
    exchange_rate_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest/USD",
        description="USD exchange rates"
    )
    usd_thb_fallback: float = Field(
        default=35.0,
        gt=0,
        description="USD to THB rate used when the rate feed has no THB entry"
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout; None waits indefinitely"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
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

    # Local persistence
    state_file: str = Field(
        default="cash-flow-storage.json",
        description="Where the local state blob is persisted"
    )
    export_dir: str = Field(
        default="exports",
        description="Directory for Excel/PDF exports"
    )

    # Display
    default_currency: str = Field(
        default="THB",
        min_length=3,
        max_length=3,
        description="Currency code used for display"
    )

    # Reducer behaviour
    relink_spending_updates: bool = Field(
        default=True,
        description=(
            "Re-apply obligation balance/paid-month adjustments when an "
            "obligation payment is edited"
        )
    )

    @property
    def state_path(self) -> Path:
        return Path(self.state_file)

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir)


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def price_feed(self) -> PriceFeedSettings:
        return PriceFeedSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("google_sheets", "price_feed", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
