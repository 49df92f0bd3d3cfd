"""
Pricing engine configuration loaded from environment variables with sensible
defaults for the Swiss marketplace.

All settings are validated at startup via Pydantic ``BaseSettings``.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the booking price engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Currency --
    default_currency: str = "CHF"

    # -- Platform fee (fraction of the subtotal) --
    platform_fee_rate: Decimal = Decimal("0.10")

    # -- Billing minimums --
    minimum_billable_hours: int = 1
    minimum_billable_days: int = 1

    # -- Holiday calendar --
    holiday_country: str = "CH"
    holiday_subdivision: Optional[str] = "ZH"
    # Weekend and holiday days are counted in this zone
    local_timezone: str = "Europe/Zurich"

    # -- Quick estimate --
    quick_estimate_default_hours: int = 1


settings = Settings()
