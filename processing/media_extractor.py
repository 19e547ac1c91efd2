"""
Media Extractor
Maps listing entries to renderable media items
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models import MediaItem, MediaKind, RawListingEntry
from .cleaner import (
    decode_html_entities,
    is_animated_image_url,
    is_resolvable_url,
    is_static_image_url,
    is_video_url,
    rewrite_gifv,
)


logger = logging.getLogger(__name__)

PERMALINK_BASE = "https://reddit.com"
HOSTED_VIDEO_HINT = "hosted:video"


def _base_fields(entry: RawListingEntry, collection: Optional[str]) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "title": entry.title,
        "collection": entry.subreddit or collection or "",
        "permalink": f"{PERMALINK_BASE}{entry.permalink}",
        "author": entry.author,
        "score": entry.ups,
    }


def extract_media(
    entry: RawListingEntry,
    data_saver: bool,
    collection: Optional[str] = None,
) -> List[MediaItem]:
    """
    Classify one listing entry and extract its media

    Rules are evaluated in priority order and the first one that matches
    decides the result:

    1. hosted video with a fallback URL
    2. gallery, one item per resolvable member
    3. destination URL by extension (video, animated image, static image)
    4. preview image only
    5. nothing

    Args:
        entry: validated listing entry
        data_saver: prefer the preview for animated images
        collection: collection name to use when the entry carries none

    Returns:
        Zero or more media items; never an item with an empty URL
    """
    base = _base_fields(entry, collection)
    preview = decode_html_entities(entry.preview_url)
    thumb = preview or None

    fallback_url = entry.video_fallback_url
    if entry.is_video and is_resolvable_url(fallback_url):
        return [MediaItem(**base, kind=MediaKind.VIDEO, url=fallback_url, thumb=thumb)]

    members = entry.gallery_members
    if entry.is_gallery and members and entry.media_metadata is not None:
        return _extract_gallery(entry, base, thumb)

    media_url = rewrite_gifv(decode_html_entities(entry.url_overridden_by_dest or entry.url))
    if is_resolvable_url(media_url):
        if is_video_url(media_url) or entry.post_hint == HOSTED_VIDEO_HINT:
            return [MediaItem(**base, kind=MediaKind.VIDEO, url=media_url, thumb=thumb)]

        if is_animated_image_url(media_url):
            url = preview if data_saver and is_resolvable_url(preview) else media_url
            return [MediaItem(**base, kind=MediaKind.IMAGE, url=url, thumb=thumb)]

        if is_static_image_url(media_url):
            return [MediaItem(**base, kind=MediaKind.IMAGE, url=media_url, thumb=thumb)]

    if is_resolvable_url(preview):
        return [MediaItem(**base, kind=MediaKind.IMAGE, url=preview, thumb=thumb)]

    return []


def _extract_gallery(
    entry: RawListingEntry,
    base: Dict[str, Any],
    thumb: Optional[str],
) -> List[MediaItem]:
    metadata = entry.media_metadata or {}
    items: List[MediaItem] = []

    for index, member in enumerate(entry.gallery_members):
        resolved = metadata.get(member.media_id) if member and member.media_id else None
        raw_url = resolved.s.u if resolved and resolved.s else None
        url = rewrite_gifv(decode_html_entities(raw_url))
        if not is_resolvable_url(url):
            continue

        kind = MediaKind.VIDEO if is_video_url(url) else MediaKind.IMAGE
        # index follows the member list, so skipped members leave gaps
        items.append(MediaItem(**{**base, "id": f"{entry.id}-{index}"}, kind=kind, url=url, thumb=thumb))

    return items


def extract_listing(payload: Any, data_saver: bool, collection: Optional[str] = None) -> List[MediaItem]:
    """
    Extract media from a decoded listing document

    Expects ``{"data": {"children": [{"data": {...}}, ...]}}``. Anything else,
    or any part of it missing, counts as zero entries. Children that do not
    validate as entries are skipped.
    """
    data = payload.get("data") if isinstance(payload, dict) else None
    children = data.get("children") if isinstance(data, dict) else None
    if not isinstance(children, list):
        return []

    items: List[MediaItem] = []
    skipped = 0
    for child in children:
        raw = child.get("data") if isinstance(child, dict) else None
        if not isinstance(raw, dict):
            skipped += 1
            continue
        try:
            entry = RawListingEntry.model_validate(raw)
        except ValidationError:
            skipped += 1
            continue
        items.extend(extract_media(entry, data_saver, collection=collection))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed entries in {collection or 'listing'}")
    return items
