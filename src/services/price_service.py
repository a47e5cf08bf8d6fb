"""
Daily electricity price service.
Serves prices from the database cache and backfills missing days from the external source.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Dict, List

from src.database.service import db_service
from src.logging_config import get_logger
from src.models.price import ZERO_PRICE, DatedPrice
from src.services.price_source import EnergiDataServicePriceSource, PriceSource
from src.utils.date_utils import missing_dates

logger = get_logger(__name__)


class PriceService:
    """Cache-aside lookups of daily prices."""

    def __init__(self, store=None, source: PriceSource = None):
        self.store = store or db_service
        self.source = source or EnergiDataServicePriceSource()

    async def get_price(self, price_date: date) -> Decimal:
        """
        Get the price for one day.

        Returns the cached price when present. Otherwise fetches it, caches it
        when non-zero and returns it. A failed fetch returns 0.
        """
        cached = await self.store.find_one_by_date(price_date)
        if cached is not None:
            return cached.price_per_unit

        received = await self._load_not_cached([price_date])
        await self._cache_prices(received)

        if received:
            return received[0].price_per_unit

        return ZERO_PRICE

    async def get_prices_for_range(self, start_date: date, end_date: date) -> Dict[date, Decimal]:
        """
        Get the price for every day from start_date to end_date (inclusive).

        Days missing from the cache are fetched concurrently; failed fetches
        are reported as 0 rather than left out. An inverted range yields an
        empty mapping.
        """
        if start_date > end_date:
            return {}

        cached = await self.store.find_all_between(start_date, end_date)
        to_fetch = missing_dates(start_date, end_date, (price.date for price in cached))

        received = await self._load_not_cached(to_fetch)
        await self._cache_prices(received)

        result = {price.date: price.price_per_unit for price in cached}
        result.update({price.date: price.price_per_unit for price in received})

        logger.debug("Resolved price range",
                     start_date=start_date.isoformat(),
                     end_date=end_date.isoformat(),
                     cached=len(cached),
                     fetched=len(received))
        return result

    async def _cache_prices(self, received: List[DatedPrice]) -> None:
        """Write every non-zero price in one batch."""
        valid = [price for price in received if price.has_price]
        if not valid:
            return

        await self.store.save_all(valid)

    async def _load_not_cached(self, required_dates: List[date]) -> List[DatedPrice]:
        """
        Fetch each day from the source.

        All requests are started before any is awaited, then awaited in order.
        A failing request becomes a zero price for its day.
        """
        pending = {
            price_date: asyncio.ensure_future(self.source.fetch_price_for_date(price_date))
            for price_date in required_dates
        }

        results = []
        for price_date, task in pending.items():
            try:
                results.append(await task)
            except Exception as e:
                logger.error("Failed to get price for date", date=price_date.isoformat(), error=str(e))
                results.append(DatedPrice(date=price_date, price_per_unit=ZERO_PRICE))

        return results


# Global price service instance
price_service = PriceService()
