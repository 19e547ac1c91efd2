"""
Collection identifiers
Parsing of free-text collection lists and the autocomplete helpers around it
"""
import re
from typing import Dict, Iterable, List, Optional

from utils.exceptions import ConfigurationError


_MARKER_PATTERN = re.compile(r"^r/", re.IGNORECASE)

SUGGESTED_COLLECTIONS: List[str] = [
    "pics",
    "videos",
    "funny",
    "memes",
    "nextfuckinglevel",
    "interestingasfuck",
    "EarthPorn",
    "wallpapers",
    "aww",
    "oddlysatisfying",
]

PRESETS: Dict[str, List[str]] = {
    "for_you": ["pics", "interestingasfuck", "nextfuckinglevel"],
    "trending": ["videos", "funny", "memes"],
}


def normalize_collections(text: Optional[str]) -> List[str]:
    """
    Split a comma-separated collection list

    Tokens are trimmed and lose a leading "r/" marker; empty tokens are
    dropped. Order and duplicates are preserved.

    Example:
        "r/pics, funny,,R/aww " -> ["pics", "funny", "aww"]
    """
    identifiers: List[str] = []
    for token in str(text or "").split(","):
        name = _MARKER_PATTERN.sub("", token.strip())
        if name:
            identifiers.append(name)
    return identifiers


def current_token(text: Optional[str]) -> str:
    """The (trimmed) token being typed, i.e. the last comma-separated part"""
    return str(text or "").split(",")[-1].strip()


def suggest_collections(
    text: Optional[str],
    candidates: Iterable[str] = SUGGESTED_COLLECTIONS,
    limit: int = 6,
) -> List[str]:
    """
    Autocomplete suggestions for the token currently being typed

    A candidate qualifies when it starts with the current token
    (case-insensitive) and is not already part of the list.
    """
    prefix = current_token(text).lower()
    selected = set(normalize_collections(text))
    matches = [
        name for name in candidates
        if name.lower().startswith(prefix) and name not in selected
    ]
    return matches[:max(0, limit)]


def apply_suggestion(text: Optional[str], name: str) -> str:
    """Replace the token being typed with ``name`` and open a new token"""
    parts = str(text or "").split(",")
    parts[-1] = f" {name}"
    joined = ",".join(parts).lstrip()
    return joined if joined.endswith(",") else f"{joined},"


def preset_query(name: str) -> str:
    """Comma-separated query for a named preset"""
    try:
        return ",".join(PRESETS[name])
    except KeyError:
        raise ConfigurationError(f"Unknown preset: {name}", {"available": sorted(PRESETS)})


def dedupe_collections(identifiers: Iterable[str]) -> List[str]:
    """Drop repeated identifiers, keeping the first occurrence"""
    seen = set()
    deduped: List[str] = []
    for name in identifiers:
        if name in seen:
            continue
        seen.add(name)
        deduped.append(name)
    return deduped
