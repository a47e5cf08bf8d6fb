"""
Electricity Price API - Cached Daily Electricity Prices

A small service returning one electricity price per calendar day. Prices are
served from PostgreSQL when cached and fetched from Energi Data Service
otherwise, then written back to the cache.

Main components:
- Price service with cache-aside single-day and date-range lookups
- Database service for the daily price cache
- External price source client
- Domain exceptions for clear error handling
"""

__version__ = "1.0.0"
