"""
Database service using PostgreSQL with asyncpg.
Stores one electricity price per calendar day and handles schema setup.
"""

from datetime import date, datetime
from typing import List, Optional

import asyncpg

from src.config import settings
from src.exceptions import DatabaseError
from src.logging_config import get_logger
from src.models.price import DatedPrice

logger = get_logger(__name__)

CURRENT_SCHEMA_VERSION = 1


class DatabaseService:
    """Daily price store backed by PostgreSQL."""

    def __init__(self, database_url: str = None):
        self.database_url = database_url or settings.database_url
        self._pool = None

    async def _get_pool(self) -> asyncpg.Pool:
        """Get or create connection pool."""
        if self._pool is None or self._pool.is_closing():
            self._pool = await asyncpg.create_pool(
                self.database_url,
                min_size=2,
                max_size=10,
                command_timeout=60
            )
        return self._pool

    async def close(self):
        """Close database connection pool."""
        if self._pool and not self._pool.is_closing():
            await self._pool.close()

    async def init_database(self) -> None:
        """Initialize database with tables and indexes."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                current_version = await self._get_schema_version(conn)

                if current_version == 0:
                    await self._create_initial_schema(conn)
                    await self._set_schema_version(conn, CURRENT_SCHEMA_VERSION)
                    logger.info("Database initialized with schema version", version=CURRENT_SCHEMA_VERSION)

        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            raise DatabaseError(f"Database initialization failed: {e}")

    async def _get_schema_version(self, conn: asyncpg.Connection) -> int:
        """Get current database schema version."""
        try:
            result = await conn.fetchval(
                "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
            )
            return result if result else 0
        except asyncpg.UndefinedTableError:
            # Table doesn't exist, this is a new database
            return 0

    async def _set_schema_version(self, conn: asyncpg.Connection, version: int) -> None:
        """Set database schema version."""
        await conn.execute(
            "INSERT INTO schema_version (version, applied_at) VALUES ($1, $2)",
            version, datetime.now()
        )

    async def _create_initial_schema(self, conn: asyncpg.Connection) -> None:
        """Create initial database schema."""
        await conn.execute("""
            CREATE TABLE schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # One row per day; zero prices are never stored
        await conn.execute("""
            CREATE TABLE electricity_daily_prices (
                id SERIAL PRIMARY KEY,
                date DATE NOT NULL,
                mwh_price NUMERIC(12,6) NOT NULL CHECK (mwh_price <> 0),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE(date)
            )
        """)

        logger.info("Initial database schema created")

    async def find_one_by_date(self, price_date: date) -> Optional[DatedPrice]:
        """Return the stored price for a day, or None when it is not cached."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow("""
                    SELECT date, mwh_price
                    FROM electricity_daily_prices
                    WHERE date = $1
                    ORDER BY id ASC
                    LIMIT 1
                """, price_date)

                if not row:
                    return None

                return DatedPrice(date=row['date'], price_per_unit=row['mwh_price'])

        except Exception as e:
            logger.error("Failed to get price for date", error=str(e), date=price_date.isoformat())
            raise DatabaseError(f"Database query failed: {e}")

    async def find_all_between(self, start_date: date, end_date: date) -> List[DatedPrice]:
        """Return all stored prices with start_date <= date <= end_date."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch("""
                    SELECT date, mwh_price
                    FROM electricity_daily_prices
                    WHERE date >= $1 AND date <= $2
                    ORDER BY date ASC
                """, start_date, end_date)

                return [
                    DatedPrice(date=row['date'], price_per_unit=row['mwh_price'])
                    for row in rows
                ]

        except Exception as e:
            logger.error(
                "Failed to get prices for range",
                error=str(e),
                start_date=start_date.isoformat(),
                end_date=end_date.isoformat(),
            )
            raise DatabaseError(f"Database query failed: {e}")

    async def save_all(self, prices: List[DatedPrice]) -> None:
        """Insert prices in one batch; days that are already stored are left untouched."""
        if not prices:
            return

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                records_data = [
                    (price.date, price.price_per_unit)
                    for price in prices
                ]

                await conn.executemany("""
                    INSERT INTO electricity_daily_prices (date, mwh_price)
                    VALUES ($1, $2)
                    ON CONFLICT (date) DO NOTHING
                """, records_data)

                logger.info("Saved daily prices", count=len(prices))

        except Exception as e:
            logger.error("Failed to save daily prices", error=str(e))
            raise DatabaseError(f"Failed to save records: {e}")

    async def get_latest_record_timestamp(self) -> Optional[datetime]:
        """Return when the most recent price row was inserted."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                return await conn.fetchval(
                    "SELECT MAX(created_at) FROM electricity_daily_prices"
                )

        except Exception as e:
            logger.error("Failed to get latest record timestamp", error=str(e))
            raise DatabaseError(f"Database query failed: {e}")

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                result = await conn.fetchval(
                    "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = 'electricity_daily_prices'"
                )

                if result != 1:
                    logger.error("Daily prices table not found")
                    return False

            return True

        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False


# Global database service instance
db_service = DatabaseService()
