"""
Database package for the Electricity Price API.
Contains the daily price store.
"""

from .service import db_service, DatabaseService

__all__ = [
    "db_service",
    "DatabaseService",
]
