"""
Aggregator Module
"""
from .feed_aggregator import (
    NOTHING_FOUND,
    FeedAggregator,
    aload_feed,
    load_feed,
    partial_failure_message,
)

__all__ = [
    "NOTHING_FOUND",
    "FeedAggregator",
    "aload_feed",
    "load_feed",
    "partial_failure_message",
]
