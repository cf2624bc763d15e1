"""Configuration package."""

from cashflow.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    PriceFeedSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "PriceFeedSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
