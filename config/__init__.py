"""
Configuration Management Module
"""
from .settings import (
    Settings,
    ListingSettings,
    CacheSettings,
    GeneralSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "ListingSettings",
    "CacheSettings",
    "GeneralSettings",
    "get_settings",
]
