"""
Data models package for the Electricity Price API.
Contains Pydantic models for daily prices and API responses.
"""

from .price import ZERO_PRICE, DailyPriceResponse, DatedPrice, HealthResponse, PriceRangeResponse

__all__ = [
    "ZERO_PRICE",
    "DatedPrice",
    "DailyPriceResponse",
    "PriceRangeResponse",
    "HealthResponse",
]
