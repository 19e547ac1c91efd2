"""
Processing Module
URL cleanup, collection identifiers and media extraction
"""
from .cleaner import decode_html_entities, rewrite_gifv, is_resolvable_url
from .identifiers import (
    PRESETS,
    SUGGESTED_COLLECTIONS,
    apply_suggestion,
    current_token,
    dedupe_collections,
    normalize_collections,
    preset_query,
    suggest_collections,
)
from .media_extractor import extract_listing, extract_media

__all__ = [
    # Cleaner
    "decode_html_entities",
    "rewrite_gifv",
    "is_resolvable_url",
    # Identifiers
    "PRESETS",
    "SUGGESTED_COLLECTIONS",
    "apply_suggestion",
    "current_token",
    "dedupe_collections",
    "normalize_collections",
    "preset_query",
    "suggest_collections",
    # Extractor
    "extract_listing",
    "extract_media",
]
