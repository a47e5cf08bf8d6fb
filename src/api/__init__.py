"""
API package for the Electricity Price API.
Contains FastAPI route handlers for daily price lookups.
"""

from .routes import router

__all__ = [
    "router",
]
