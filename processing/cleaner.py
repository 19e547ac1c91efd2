"""
URL Cleaner
Unescaping and extension helpers for URLs delivered by the listing API
"""
import re
from typing import Optional
from urllib.parse import urlparse


# Only the entities the listing API emits inside URL fields
_HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)

GIFV_PATTERN = re.compile(r"\.gifv$", re.IGNORECASE)
VIDEO_PATTERN = re.compile(r"\.(mp4|webm)$", re.IGNORECASE)
ANIMATED_IMAGE_PATTERN = re.compile(r"\.gif$", re.IGNORECASE)
STATIC_IMAGE_PATTERN = re.compile(r"\.(jpg|jpeg|png|webp)$", re.IGNORECASE)


def decode_html_entities(value: Optional[str]) -> str:
    """
    Undo the HTML escaping applied to URL fields

    Args:
        value: escaped text, may be None

    Returns:
        Unescaped text, "" for None
    """
    if not value:
        return ""
    text = str(value)
    for entity, char in _HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def rewrite_gifv(url: str) -> str:
    """Legacy .gifv links point at an mp4 with the same stem"""
    return GIFV_PATTERN.sub(".mp4", url)


def is_video_url(url: str) -> bool:
    return bool(VIDEO_PATTERN.search(url))


def is_animated_image_url(url: str) -> bool:
    return bool(ANIMATED_IMAGE_PATTERN.search(url))


def is_static_image_url(url: str) -> bool:
    return bool(STATIC_IMAGE_PATTERN.search(url))


def is_resolvable_url(url: Optional[str]) -> bool:
    """Absolute http(s) URL with a host"""
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
