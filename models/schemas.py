"""
Data Models / Schemas
Listing records as delivered upstream, and the normalized media feed
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaKind(str, Enum):
    """Renderable media kind"""
    IMAGE = "image"
    VIDEO = "video"


# ---------------------------------------------------------------------------
# Upstream listing records. Every sub-structure is optional; absence is data.
# ---------------------------------------------------------------------------

class _LooseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else None


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class HostedVideo(_LooseModel):
    fallback_url: Optional[str] = None

    @field_validator("fallback_url", mode="before")
    @classmethod
    def _url(cls, value: Any) -> Any:
        return _text_or_none(value)


class EntryMedia(_LooseModel):
    reddit_video: Optional[HostedVideo] = None

    @field_validator("reddit_video", mode="before")
    @classmethod
    def _video(cls, value: Any) -> Any:
        return _mapping_or_none(value)


class PreviewSource(_LooseModel):
    url: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _url(cls, value: Any) -> Any:
        return _text_or_none(value)


class PreviewImage(_LooseModel):
    source: Optional[PreviewSource] = None

    @field_validator("source", mode="before")
    @classmethod
    def _source(cls, value: Any) -> Any:
        return _mapping_or_none(value)


class Preview(_LooseModel):
    # null or non-object elements are kept as None so positions stay intact
    images: Optional[List[Optional[PreviewImage]]] = None

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [_mapping_or_none(image) for image in value]


class GalleryMember(_LooseModel):
    media_id: Optional[str] = None

    @field_validator("media_id", mode="before")
    @classmethod
    def _media_id(cls, value: Any) -> Any:
        return _text_or_none(value)


class GalleryData(_LooseModel):
    items: Optional[List[Optional[GalleryMember]]] = None

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [_mapping_or_none(member) for member in value]


class MediaMetadataSource(_LooseModel):
    u: Optional[str] = None

    @field_validator("u", mode="before")
    @classmethod
    def _u(cls, value: Any) -> Any:
        return _text_or_none(value)


class MediaMetadata(_LooseModel):
    s: Optional[MediaMetadataSource] = None

    @field_validator("s", mode="before")
    @classmethod
    def _s(cls, value: Any) -> Any:
        return _mapping_or_none(value)


class RawListingEntry(_LooseModel):
    """One post record from a listing's data.children[].data"""
    id: str = Field(..., description="Entry identifier")
    title: str = Field(default="", description="Post title")
    subreddit: str = Field(default="", description="Collection the post belongs to")
    permalink: str = Field(default="", description="Site-relative permalink")
    author: str = Field(default="[deleted]", description="Author name")
    ups: int = Field(default=0, description="Popularity score")

    post_hint: Optional[str] = None
    is_video: Optional[bool] = None
    media: Optional[EntryMedia] = None
    preview: Optional[Preview] = None
    url_overridden_by_dest: Optional[str] = None
    url: Optional[str] = None
    is_gallery: Optional[bool] = None
    gallery_data: Optional[GalleryData] = None
    media_metadata: Optional[Dict[str, Optional[MediaMetadata]]] = None

    @field_validator("id", mode="before")
    @classmethod
    def _non_empty_id(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("id is required")
        return text

    @field_validator("title", "subreddit", "permalink", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return str(value or "")

    @field_validator("author", mode="before")
    @classmethod
    def _author(cls, value: Any) -> str:
        return str(value or "[deleted]")

    @field_validator("ups", mode="before")
    @classmethod
    def _score(cls, value: Any) -> int:
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("media", "preview", "gallery_data", mode="before")
    @classmethod
    def _drop_non_mapping(cls, value: Any) -> Any:
        # the API sends null, {} and occasionally strings for absent structures
        return value if isinstance(value, dict) else None

    @field_validator("media_metadata", mode="before")
    @classmethod
    def _metadata(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return None
        return {str(key): _mapping_or_none(meta) for key, meta in value.items()}

    @property
    def preview_url(self) -> Optional[str]:
        """Raw (still escaped) URL of the first preview image, if any"""
        if not self.preview or not self.preview.images:
            return None
        first = self.preview.images[0]
        if first is None or first.source is None:
            return None
        return first.source.url

    @property
    def video_fallback_url(self) -> Optional[str]:
        if self.media and self.media.reddit_video:
            return self.media.reddit_video.fallback_url
        return None

    @property
    def gallery_members(self) -> List[Optional[GalleryMember]]:
        if self.gallery_data and self.gallery_data.items:
            return list(self.gallery_data.items)
        return []


# ---------------------------------------------------------------------------
# Normalized feed
# ---------------------------------------------------------------------------

class MediaItem(BaseModel):
    """A renderable media item; immutable once extracted"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identifier, unique within a listing")
    title: str = Field(default="", description="Display title")
    collection: str = Field(..., description="Originating collection")
    permalink: str = Field(..., description="Canonical external permalink")
    kind: MediaKind = Field(..., description="image or video")
    url: str = Field(..., min_length=1, description="Resolved media URL")
    thumb: Optional[str] = Field(None, description="Poster / thumbnail URL")
    author: str = Field(default="[deleted]", description="Author name")
    score: int = Field(default=0, description="Popularity score")


class CacheEntry(BaseModel):
    """Timestamped snapshot of the items extracted for one (collection, mode)"""
    model_config = ConfigDict(frozen=True)

    captured_at: float = Field(..., description="Capture time (epoch seconds)")
    items: List[MediaItem] = Field(default_factory=list)

    def is_live(self, now: float, ttl: float) -> bool:
        return now - self.captured_at < ttl


class FetchOutcome(BaseModel):
    """Per-collection result: items plus provenance, or a diagnostic"""
    collection: str
    ok: bool
    items: List[MediaItem] = Field(default_factory=list)
    provenance: Optional[str] = None
    diagnostic: Optional[str] = None

    @classmethod
    def success(cls, collection: str, items: List[MediaItem], provenance: str) -> "FetchOutcome":
        return cls(collection=collection, ok=True, items=list(items), provenance=provenance)

    @classmethod
    def failure(cls, collection: str, diagnostic: str) -> "FetchOutcome":
        return cls(collection=collection, ok=False, diagnostic=diagnostic)


class FeedRequest(BaseModel):
    """Feed load request from presentation code"""
    identifiers: List[str] = Field(default_factory=list)
    data_saver: bool = Field(default=True, description="Prefer reduced-bandwidth media")

    @field_validator("identifiers", mode="before")
    @classmethod
    def _clean_identifiers(cls, value: Any) -> List[str]:
        return [str(item).strip() for item in list(value or []) if str(item or "").strip()]


class FeedResult(BaseModel):
    """Ranked feed with provenance and an optional caller-visible diagnostic"""
    items: List[MediaItem] = Field(default_factory=list)
    provenance_summary: str = ""
    diagnostic: Optional[str] = None
    failed_sources: int = 0
    outcomes: List[FetchOutcome] = Field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.items)

    def summary(self) -> Dict[str, int]:
        """Counts per media kind plus source totals"""
        videos = sum(1 for item in self.items if item.kind == MediaKind.VIDEO)
        return {
            "images": self.total_count - videos,
            "videos": videos,
            "total": self.total_count,
            "sources": len(self.outcomes),
            "failed_sources": self.failed_sources,
        }
