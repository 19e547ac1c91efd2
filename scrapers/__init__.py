"""
Scrapers Module
"""
from .base import BaseScraper
from .listing_scraper import (
    ALTERNATE_ENDPOINTS,
    CANONICAL_ENDPOINT,
    ListingEndpoint,
    ListingScraper,
)

__all__ = [
    "BaseScraper",
    "ALTERNATE_ENDPOINTS",
    "CANONICAL_ENDPOINT",
    "ListingEndpoint",
    "ListingScraper",
]
