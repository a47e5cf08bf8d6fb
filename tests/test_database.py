"""
Unit tests for the database service.
The asyncpg pool is replaced by mocks so no PostgreSQL server is needed.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.database.service import DatabaseService
from src.exceptions import DatabaseError
from src.models.price import DatedPrice


@pytest.fixture
def conn():
    """Mock asyncpg connection."""
    return AsyncMock()


@pytest.fixture
def db(conn):
    """DatabaseService wired to a mock pool handing out conn."""
    pool = MagicMock()
    pool.is_closing.return_value = False
    pool.acquire.return_value.__aenter__.return_value = conn
    pool.acquire.return_value.__aexit__.return_value = False

    service = DatabaseService(database_url="postgresql://test@localhost/test")
    service._pool = pool
    return service


class TestFindOneByDate:

    @pytest.mark.asyncio
    async def test_returns_stored_price(self, db, conn):
        conn.fetchrow.return_value = {"date": date(2024, 1, 2), "mwh_price": Decimal("45.100000")}

        result = await db.find_one_by_date(date(2024, 1, 2))

        assert result == DatedPrice(date=date(2024, 1, 2), price_per_unit=Decimal("45.1"))
        assert conn.fetchrow.call_args.args[1] == date(2024, 1, 2)

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, db, conn):
        conn.fetchrow.return_value = None

        assert await db.find_one_by_date(date(2024, 1, 2)) is None

    @pytest.mark.asyncio
    async def test_wraps_errors(self, db, conn):
        conn.fetchrow.side_effect = RuntimeError("connection reset")

        with pytest.raises(DatabaseError, match="connection reset"):
            await db.find_one_by_date(date(2024, 1, 2))


class TestFindAllBetween:

    @pytest.mark.asyncio
    async def test_maps_rows(self, db, conn):
        conn.fetch.return_value = [
            {"date": date(2024, 1, 1), "mwh_price": Decimal("40.00")},
            {"date": date(2024, 1, 3), "mwh_price": Decimal("-2.50")},
        ]

        result = await db.find_all_between(date(2024, 1, 1), date(2024, 1, 3))

        assert [price.date for price in result] == [date(2024, 1, 1), date(2024, 1, 3)]
        assert result[1].price_per_unit == Decimal("-2.50")
        query, start, end = conn.fetch.call_args.args
        assert "date >= $1 AND date <= $2" in query
        assert (start, end) == (date(2024, 1, 1), date(2024, 1, 3))

    @pytest.mark.asyncio
    async def test_wraps_errors(self, db, conn):
        conn.fetch.side_effect = RuntimeError("timeout")

        with pytest.raises(DatabaseError, match="timeout"):
            await db.find_all_between(date(2024, 1, 1), date(2024, 1, 3))


class TestSaveAll:

    @pytest.mark.asyncio
    async def test_batch_insert(self, db, conn):
        prices = [
            DatedPrice(date=date(2024, 1, 1), price_per_unit=Decimal("40.00")),
            DatedPrice(date=date(2024, 1, 4), price_per_unit=Decimal("38.20")),
        ]

        await db.save_all(prices)

        conn.executemany.assert_awaited_once()
        query, rows = conn.executemany.call_args.args
        assert "ON CONFLICT (date) DO NOTHING" in query
        assert rows == [
            (date(2024, 1, 1), Decimal("40.00")),
            (date(2024, 1, 4), Decimal("38.20")),
        ]

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self, db, conn):
        await db.save_all([])

        db._pool.acquire.assert_not_called()
        conn.executemany.assert_not_called()

    @pytest.mark.asyncio
    async def test_wraps_errors(self, db, conn):
        conn.executemany.side_effect = RuntimeError("disk full")

        with pytest.raises(DatabaseError, match="Failed to save records"):
            await db.save_all([DatedPrice(date=date(2024, 1, 1), price_per_unit=Decimal("1"))])


class TestSchemaAndHealth:

    @pytest.mark.asyncio
    async def test_init_database_creates_schema_once(self, db, conn):
        conn.fetchval.return_value = None

        await db.init_database()

        statements = " ".join(call.args[0] for call in conn.execute.call_args_list)
        assert "CREATE TABLE schema_version" in statements
        assert "CREATE TABLE electricity_daily_prices" in statements
        assert "UNIQUE(date)" in statements

    @pytest.mark.asyncio
    async def test_init_database_skips_current_schema(self, db, conn):
        conn.fetchval.return_value = 1

        await db.init_database()

        conn.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_health_check(self, db, conn):
        conn.fetchval.return_value = 1
        assert await db.health_check() is True

        conn.fetchval.return_value = 0
        assert await db.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_connection_failure(self, db, conn):
        conn.fetchval.side_effect = OSError("connection refused")

        assert await db.health_check() is False
