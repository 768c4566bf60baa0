"""Business settings for the storefront.

Infrastructure (databases, brokers, event store) is configured through
``domain.toml``. The values here are the commercial rules the order engine
applies, read once from the environment.
"""

import os
from enum import Enum
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field


class RefundBasis(Enum):
    """What an approved return credits back to the wallet.

    ``UNIT_PRICE`` refunds a single unit of the order line regardless of the
    quantity bought; ``LINE_TOTAL`` refunds price times quantity. Unit price is
    the historical behaviour and stays the default until product ownership
    decides otherwise.
    """

    UNIT_PRICE = "unit_price"
    LINE_TOTAL = "line_total"


class StorefrontSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    delivery_lead_days: int = Field(default=7, ge=0)
    # Customer-facing copy advertises 7 days; the engine has always used 30.
    return_window_days: int = Field(default=30, ge=0)
    refund_basis: RefundBasis = RefundBasis.UNIT_PRICE

    @classmethod
    def from_env(cls) -> "StorefrontSettings":
        values = {}
        if lead := os.getenv("STOREFRONT_DELIVERY_LEAD_DAYS"):
            values["delivery_lead_days"] = int(lead)
        if window := os.getenv("STOREFRONT_RETURN_WINDOW_DAYS"):
            values["return_window_days"] = int(window)
        if basis := os.getenv("STOREFRONT_REFUND_BASIS"):
            values["refund_basis"] = RefundBasis(basis.lower())
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> StorefrontSettings:
    """Return the process-wide settings. Call ``get_settings.cache_clear()`` after changing the environment."""
    return StorefrontSettings.from_env()
