"""Runtime settings.

Read from ``STOREFRONT_*`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Path("data")
    free_shipping_threshold: Decimal = Decimal("50.00")
    flat_shipping_fee: Decimal = Decimal("5.99")
    currency: str = "USD"
    public_base_url: str | None = None
    log_level: str = "WARNING"

    @field_validator("free_shipping_threshold", "flat_shipping_fee")
    @classmethod
    def _non_negative(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("log_level", "currency")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
