"""
Pydantic data models for daily price data and API responses.
Defines the structure for dated prices and API response formats.
"""

import datetime as dt
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Placeholder price for dates without data (failed or empty fetch)
ZERO_PRICE = Decimal("0")


class DatedPrice(BaseModel):
    """
    Electricity price for a single calendar day.

    A price of exactly zero means "no data": it is what a failed fetch turns
    into and it is never written to the database.
    """
    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(description="Calendar day the price applies to")
    price_per_unit: Decimal = Field(
        description="Average day-ahead price (EUR/MWh) - can be negative in some markets",
    )

    @property
    def has_price(self) -> bool:
        """True when the price is not the zero placeholder."""
        return self.price_per_unit != ZERO_PRICE


class DailyPriceResponse(BaseModel):
    """
    API response for a single day.
    A price of 0 signals that no data is available for that day.
    """
    date: dt.date = Field(description="Requested calendar day")
    price: Decimal = Field(description="Price per MWh, 0 when unknown")


class PriceRangeResponse(BaseModel):
    """
    API response for an inclusive date range.
    """
    start_date: dt.date = Field(description="First day of the range")
    end_date: dt.date = Field(description="Last day of the range (inclusive)")
    prices: Dict[dt.date, Decimal] = Field(
        default_factory=dict,
        description="Price per day; failed fetches are reported as 0"
    )


class HealthResponse(BaseModel):
    """
    Health check response model.
    """
    status: str = Field(description="Health status")
    timestamp: dt.datetime = Field(description="Health check timestamp")
    details: Optional[dict] = Field(default=None, description="Additional health details")
