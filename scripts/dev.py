#!/usr/bin/env python3
"""
Development helper scripts for the Electricity Price API.
Provides utilities for database setup, manual lookups and source checks.
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

# Add src to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import settings
from src.database.service import db_service
from src.logging_config import setup_logging
from src.services.price_service import price_service
from src.services.price_source import EnergiDataServicePriceSource


async def init_db():
    """Initialize the database with required tables."""
    print("Initializing database...")
    setup_logging()
    await db_service.init_database()
    await db_service.close()
    print("Database initialized")


async def get_price(price_date: date):
    """Look up one day through the cache."""
    setup_logging()
    try:
        price = await price_service.get_price(price_date)
        print(f"{price_date.isoformat()}: {price} EUR/MWh")
    finally:
        await db_service.close()


async def get_range(start_date: date, end_date: date):
    """Look up an inclusive range through the cache, backfilling missing days."""
    setup_logging()
    try:
        prices = await price_service.get_prices_for_range(start_date, end_date)
    finally:
        await db_service.close()

    if not prices:
        print("No prices for the requested range")
        return

    print(f"\nFound {len(prices)} daily prices:")
    print("-" * 40)
    print(f"{'Date':<12} {'Price (EUR/MWh)':>20}")
    print("-" * 40)

    for price_date in sorted(prices):
        print(f"{price_date.isoformat():<12} {prices[price_date]:>20}")


async def test_source(price_date: date):
    """Fetch one day straight from the price source, without caching."""
    print(f"Testing price source for {price_date.isoformat()}...")
    setup_logging()

    try:
        price = await EnergiDataServicePriceSource().fetch_price_for_date(price_date)
        print(f"Received {price.price_per_unit} EUR/MWh for {price.date.isoformat()}")
    except Exception as e:
        print(f"Price source request failed: {e}")


def show_config():
    """Display current configuration settings."""
    print("Current Configuration:")
    print("-" * 40)
    print(f"API Host: {settings.api_host}")
    print(f"API Port: {settings.api_port}")
    print(f"Debug Mode: {settings.api_debug}")
    print(f"Price Source: {settings.price_source_base_url}/dataset/{settings.price_source_dataset}")
    print(f"Price Area: {settings.price_area}")
    print(f"Price Column: {settings.price_source_price_column}")
    print(f"Market Timezone: {settings.market_timezone}")
    print(f"Max Range: {settings.max_range_days} days")
    print(f"Log Level: {settings.log_level}")


def _parse_date(value: str) -> date:
    return date.fromisoformat(value)


def main():
    """Main script entry point with command selection."""
    if len(sys.argv) < 2:
        print("Electricity Price API Development Scripts")
        print("Usage: python scripts/dev.py <command> [args]")
        print("\nAvailable commands:")
        print("  init-db                 - Initialize database")
        print("  get-price <date>        - Get one day's price through the cache")
        print("  get-range <start> <end> - Get an inclusive range through the cache")
        print("  test-source <date>      - Fetch one day from the price source only")
        print("  show-config             - Display current configuration")
        return

    command = sys.argv[1]
    args = sys.argv[2:]

    try:
        if command == "init-db":
            asyncio.run(init_db())
        elif command == "get-price" and len(args) == 1:
            asyncio.run(get_price(_parse_date(args[0])))
        elif command == "get-range" and len(args) == 2:
            asyncio.run(get_range(_parse_date(args[0]), _parse_date(args[1])))
        elif command == "test-source" and len(args) == 1:
            asyncio.run(test_source(_parse_date(args[0])))
        elif command == "show-config":
            show_config()
        else:
            print(f"Unknown command or wrong arguments: {' '.join(sys.argv[1:])}")
            print("Run without arguments to see available commands")
    except ValueError as e:
        print(f"Invalid date: {e}")


if __name__ == "__main__":
    main()
