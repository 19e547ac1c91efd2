"""
Storage Module
"""
from .cache import (
    BaseCache,
    MemoryCache,
    DiskCache,
    ListingCache,
    PROVENANCE_DISK,
    PROVENANCE_MEMORY,
    get_cache,
    get_listing_cache,
)

__all__ = [
    "BaseCache",
    "MemoryCache",
    "DiskCache",
    "ListingCache",
    "PROVENANCE_DISK",
    "PROVENANCE_MEMORY",
    "get_cache",
    "get_listing_cache",
]
