"""
Data Models
"""
from .schemas import (
    MediaKind,
    RawListingEntry,
    MediaItem,
    CacheEntry,
    FetchOutcome,
    FeedRequest,
    FeedResult,
)

__all__ = [
    "MediaKind",
    "RawListingEntry",
    "MediaItem",
    "CacheEntry",
    "FetchOutcome",
    "FeedRequest",
    "FeedResult",
]
