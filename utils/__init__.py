"""
Utils Module
"""
from .logger import setup_logger
from .exceptions import (
    SubSwipeError,
    ConfigurationError,
    ScraperError,
    ListingFetchError,
    StorageError,
    CacheError,
)

__all__ = [
    "setup_logger",
    "SubSwipeError",
    "ConfigurationError",
    "ScraperError",
    "ListingFetchError",
    "StorageError",
    "CacheError",
]
