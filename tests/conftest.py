"""
Test configuration and fixtures for the Electricity Price API tests.
Contains shared fixtures and test utilities.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.main import create_app
from src.models.price import DatedPrice


class FakePriceStore:
    """
    In-memory stand-in for the database service.
    Records every batch passed to save_all.
    """

    def __init__(self, prices: Optional[Dict[date, Decimal]] = None):
        self.prices = dict(prices or {})
        self.saved_batches: List[List[DatedPrice]] = []
        self.find_one_calls = 0
        self.find_all_calls = 0

    async def find_one_by_date(self, price_date: date) -> Optional[DatedPrice]:
        self.find_one_calls += 1
        if price_date not in self.prices:
            return None
        return DatedPrice(date=price_date, price_per_unit=self.prices[price_date])

    async def find_all_between(self, start_date: date, end_date: date) -> List[DatedPrice]:
        self.find_all_calls += 1
        return [
            DatedPrice(date=price_date, price_per_unit=price)
            for price_date, price in sorted(self.prices.items())
            if start_date <= price_date <= end_date
        ]

    async def save_all(self, prices: List[DatedPrice]) -> None:
        self.saved_batches.append(list(prices))
        for price in prices:
            self.prices.setdefault(price.date, price.price_per_unit)


def make_source(prices: Dict[date, object]) -> AsyncMock:
    """
    Build a mock price source.

    Values in prices are either a Decimal to return or an exception to raise.
    Dates not listed raise LookupError.
    """
    async def fetch(price_date: date) -> DatedPrice:
        outcome = prices.get(price_date, LookupError(f"no price for {price_date}"))
        if isinstance(outcome, Exception):
            raise outcome
        return DatedPrice(date=price_date, price_per_unit=outcome)

    source = AsyncMock()
    source.fetch_price_for_date = AsyncMock(side_effect=fetch)
    return source


@pytest.fixture
def test_app():
    """
    Create a test instance of the FastAPI application.
    """
    app = create_app()
    return app


@pytest.fixture
def test_client(test_app):
    """
    Create a test client for the FastAPI application.
    """
    return TestClient(test_app)


@pytest.fixture
def fake_store() -> FakePriceStore:
    """
    Store holding 45.10 for 2024-01-02.
    """
    return FakePriceStore({date(2024, 1, 2): Decimal("45.10")})


@pytest.fixture
def source_factory():
    """
    Factory fixture for mock price sources, see make_source.
    """
    return make_source
