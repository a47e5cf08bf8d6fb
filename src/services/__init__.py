"""
Services package for the Electricity Price API.
Contains the cached daily price service and the external price source.
"""

from .price_service import price_service, PriceService
from .price_source import EnergiDataServicePriceSource, PriceSource

__all__ = [
    "price_service",
    "PriceService",
    "EnergiDataServicePriceSource",
    "PriceSource",
]
