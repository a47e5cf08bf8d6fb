"""
Domain exceptions for the Electricity Price API.
Provides clear, typed exceptions for business logic errors.
"""


class PriceAPIException(Exception):
    """Base exception for all Electricity Price API errors."""
    pass


class DataFetchError(PriceAPIException):
    """Raised when fetching a price from the external source fails."""
    pass


class DatabaseError(PriceAPIException):
    """Raised when database operations fail."""
    pass
