# app/core/settings.py
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Pricing ---
    # Leeg = meegeleverde app/pricing/rules/shipping_rates.yaml
    PRICING_RATES_FILE: Optional[str] = None
    PRICING_EXCHANGE_RATE: Optional[Decimal] = None
    PRICING_CURRENCY: Optional[str] = None
    PRICING_CURRENCY_SYMBOL: Optional[str] = None

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # leest .env
