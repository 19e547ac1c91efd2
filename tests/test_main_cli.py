"""
Tests for the command-line entrypoint
"""
import json

import pytest

import main
from config import get_settings
from models import FeedResult, FetchOutcome, MediaItem, MediaKind
from storage import ListingCache


@pytest.fixture(autouse=True)
def memory_only_cache(monkeypatch):
    cache = ListingCache(ttl=300, key_prefix="subswipe:")
    monkeypatch.setattr(main, "get_listing_cache", lambda: cache)
    return cache


def test_suggest_command(capsys):
    assert main.main(["suggest", "--query", "pics, fu"]) == 0

    assert json.loads(capsys.readouterr().out) == {"suggestions": ["funny"]}


def test_presets_command(capsys):
    assert main.main(["presets"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["for_you"] == "pics,interestingasfuck,nextfuckinglevel"


def test_feed_command_json(monkeypatch, capsys, memory_only_cache):
    seen = {}
    item = MediaItem(
        id="a1",
        title="A post",
        collection="pics",
        permalink="https://reddit.com/r/pics/comments/a1/",
        kind=MediaKind.VIDEO,
        url="https://v.redd.it/a1/DASH_480.mp4",
        author="someone",
        score=9,
    )

    def _fake_load_feed(request, show_progress=False, settings=None, cache=None):
        seen["request"] = request
        seen["settings"] = settings
        seen["cache"] = cache
        return FeedResult(
            items=[item],
            provenance_summary="Loaded via: reddit • 1 media items",
            outcomes=[FetchOutcome.success("pics", [item], "reddit")],
        )

    monkeypatch.setattr(main, "load_feed", _fake_load_feed)

    code = main.main(["feed", "--collections", "r/pics, funny", "--full-quality", "--json"])

    assert code == 0
    assert seen["request"].identifiers == ["pics", "funny"]
    assert seen["request"].data_saver is False
    assert seen["cache"] is memory_only_cache
    assert seen["settings"].listing.fallback_enabled is True
    payload = json.loads(capsys.readouterr().out)
    assert payload["items"][0]["kind"] == "video"
    assert "outcomes" not in payload


def test_feed_command_reports_total_failure(monkeypatch):
    monkeypatch.setattr(
        main,
        "load_feed",
        lambda request, **kwargs: FeedResult(diagnostic="r/pics: HTTP 503", failed_sources=1),
    )

    assert main.main(["feed", "--collections", "pics"]) == 1


def test_no_fallback_leaves_global_settings_untouched(monkeypatch):
    seen = {}

    def _fake_load_feed(request, show_progress=False, settings=None, cache=None):
        seen["settings"] = settings
        return FeedResult(provenance_summary="Loaded via: reddit • 0 media items")

    monkeypatch.setattr(main, "load_feed", _fake_load_feed)

    main.main(["feed", "--collections", "pics", "--no-fallback", "--json"])

    assert seen["settings"].listing.fallback_enabled is False
    assert seen["settings"] is not get_settings()
    assert get_settings().listing.fallback_enabled is True
