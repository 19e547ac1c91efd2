"""
Custom Exceptions
"""
from typing import Optional


class SubSwipeError(Exception):
    """Base exception for the feed core"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(SubSwipeError):
    """Invalid configuration"""
    pass


class ScraperError(SubSwipeError):
    """Scraper error"""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class ListingFetchError(ScraperError):
    """A single listing endpoint could not deliver a usable document"""

    def __init__(
        self,
        message: str,
        source: str = None,
        endpoint: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, source=source)
        self.endpoint = endpoint
        self.status = status

    def __str__(self):
        # the message alone is the user-facing diagnostic
        return self.message


class StorageError(SubSwipeError):
    """Storage error"""
    pass


class CacheError(StorageError):
    """Cache error"""
    pass
