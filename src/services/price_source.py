"""
External day-ahead price source.
Fetches hourly prices from Energi Data Service and averages them into one daily price.
"""

import json
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Protocol

import httpx
import pandas as pd

from src.config import settings
from src.exceptions import DataFetchError
from src.logging_config import get_logger
from src.models.price import ZERO_PRICE, DatedPrice

logger = get_logger(__name__)

# Same scale as the mwh_price column
PRICE_QUANTUM = Decimal("0.000001")


class PriceSource(Protocol):
    async def fetch_price_for_date(self, price_date: date) -> DatedPrice: ...


class EnergiDataServicePriceSource:
    """Daily electricity prices from the Energi Data Service open data API."""

    def __init__(
        self,
        base_url: str = None,
        dataset: str = None,
        price_column: str = None,
        price_area: str = None,
        timeout: float = None,
    ):
        self.base_url = (base_url or settings.price_source_base_url).rstrip("/")
        self.dataset = dataset or settings.price_source_dataset
        self.price_column = price_column or settings.price_source_price_column
        self.price_area = price_area or settings.price_area
        self.timeout = timeout or settings.price_source_timeout

    async def fetch_price_for_date(self, price_date: date) -> DatedPrice:
        """Fetch the hourly prices for one day and return their average."""
        url = self._build_url()
        params = self._build_params(price_date)

        payload = await self._fetch_json(url, params)
        records = payload.get("records", []) if isinstance(payload, dict) else []

        price = self._average_price(records)
        if price is None:
            logger.warning("No hourly prices returned for date",
                           date=price_date.isoformat(),
                           price_area=self.price_area)
            return DatedPrice(date=price_date, price_per_unit=ZERO_PRICE)

        logger.debug("Fetched daily price",
                     date=price_date.isoformat(),
                     price_area=self.price_area,
                     hours=len(records),
                     price=f"{price} EUR/MWh")

        return DatedPrice(date=price_date, price_per_unit=price)

    def _build_url(self) -> str:
        """Build the dataset URL."""
        return f"{self.base_url}/dataset/{self.dataset}"

    def _build_params(self, price_date: date) -> dict:
        """Build query parameters covering exactly one calendar day."""
        return {
            'start': price_date.strftime('%Y-%m-%d'),
            # End is exclusive
            'end': (price_date + timedelta(days=1)).strftime('%Y-%m-%d'),
            'filter': json.dumps({"PriceArea": [self.price_area]}),
            'columns': self.price_column,
            'limit': 0,
        }

    async def _fetch_json(self, url: str, params: dict) -> dict:
        """Download and decode the JSON payload."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise DataFetchError(f"HTTP error: {e}")
        except Exception as e:
            raise DataFetchError(f"Unexpected error: {e}")

    def _average_price(self, records: List[dict]) -> Optional[Decimal]:
        """
        Average the hourly prices.

        Returns None when no usable hourly price is present. A non-zero mean
        is never rounded to zero, so real data cannot look like missing data.
        """
        if not records:
            return None

        try:
            df = pd.DataFrame.from_records(records)
            if self.price_column not in df.columns:
                raise ValueError(f"Missing price column: {self.price_column}")

            hourly = pd.to_numeric(df[self.price_column], errors="coerce").dropna()
            if hourly.empty:
                return None

            mean = Decimal(str(hourly.mean()))
            price = mean.quantize(PRICE_QUANTUM)
            if price == ZERO_PRICE and mean != ZERO_PRICE:
                price = PRICE_QUANTUM.copy_sign(mean)
            return price

        except (ValueError, TypeError, InvalidOperation) as e:
            raise DataFetchError(f"Price parsing failed: {e}")
