"""
Tests for the listing-entry to media-item mapping
"""
from models import MediaKind, RawListingEntry
from processing import extract_listing, extract_media


def _entry(**fields) -> RawListingEntry:
    base = {
        "id": "a1",
        "title": "A post",
        "subreddit": "pics",
        "permalink": "/r/pics/comments/a1/a_post/",
        "author": "someone",
        "ups": 42,
    }
    base.update(fields)
    return RawListingEntry.model_validate(base)


PREVIEW = {"images": [{"source": {"url": "https://preview.redd.it/p.jpg?width=640&amp;s=abc"}}]}
DECODED_PREVIEW = "https://preview.redd.it/p.jpg?width=640&s=abc"


class TestDirectVideo:

    def test_hosted_video_with_preview_thumb(self):
        entry = _entry(
            is_video=True,
            media={"reddit_video": {"fallback_url": "https://v.redd.it/a1/DASH_480.mp4"}},
            preview={"images": [{"source": {"url": "https://preview&amp;x.jpg"}}]},
        )

        items = extract_media(entry, data_saver=True)

        assert len(items) == 1
        assert items[0].kind == MediaKind.VIDEO
        assert items[0].url == "https://v.redd.it/a1/DASH_480.mp4"
        assert items[0].thumb == "https://preview&x.jpg"
        assert items[0].id == "a1"
        assert items[0].permalink == "https://reddit.com/r/pics/comments/a1/a_post/"
        assert items[0].score == 42

    def test_video_flag_without_fallback_falls_through(self):
        entry = _entry(is_video=True, media=None, url="https://i.redd.it/x.png")

        items = extract_media(entry, data_saver=False)

        assert [(i.kind, i.url) for i in items] == [(MediaKind.IMAGE, "https://i.redd.it/x.png")]

    def test_video_wins_over_gallery(self):
        entry = _entry(
            is_video=True,
            media={"reddit_video": {"fallback_url": "https://v.redd.it/a1/DASH_720.mp4"}},
            is_gallery=True,
            gallery_data={"items": [{"media_id": "m1"}]},
            media_metadata={"m1": {"s": {"u": "https://i.redd.it/m1.jpg"}}},
        )

        items = extract_media(entry, data_saver=True)

        assert len(items) == 1
        assert items[0].kind == MediaKind.VIDEO


class TestGallery:

    def test_members_in_order_with_positional_ids(self):
        entry = _entry(
            is_gallery=True,
            gallery_data={"items": [{"media_id": "m1"}, {"media_id": "m2"}, {"media_id": "m3"}]},
            media_metadata={
                "m1": {"s": {"u": "https://preview.redd.it/m1.jpg?a=1&amp;b=2"}},
                "m2": {"status": "failed"},
                "m3": {"s": {"u": "https://i.imgur.com/m3.gifv"}},
            },
            preview=PREVIEW,
        )

        items = extract_media(entry, data_saver=True)

        assert [i.id for i in items] == ["a1-0", "a1-2"]
        assert items[0].url == "https://preview.redd.it/m1.jpg?a=1&b=2"
        assert items[0].kind == MediaKind.IMAGE
        assert items[1].url == "https://i.imgur.com/m3.mp4"
        assert items[1].kind == MediaKind.VIDEO
        assert all(i.thumb == DECODED_PREVIEW for i in items)

    def test_null_members_and_metadata_are_skipped(self):
        entry = _entry(
            id="g1",
            is_gallery=True,
            gallery_data={"items": [{"media_id": "m1"}, None, {"media_id": "m2"}, {"media_id": 7}]},
            media_metadata={
                "m1": {"s": {"u": "https://i.redd.it/m1.jpg"}},
                "m2": None,
            },
        )

        items = extract_media(entry, data_saver=True)

        assert [i.id for i in items] == ["g1-0"]

    def test_gallery_with_no_resolvable_members_is_empty(self):
        entry = _entry(
            is_gallery=True,
            gallery_data={"items": [{"media_id": "m1"}]},
            media_metadata={},
            url="https://i.redd.it/cover.jpg",
        )

        assert extract_media(entry, data_saver=True) == []

    def test_gallery_without_metadata_uses_destination(self):
        entry = _entry(
            is_gallery=True,
            gallery_data={"items": [{"media_id": "m1"}]},
            url="https://i.redd.it/cover.jpg",
        )

        items = extract_media(entry, data_saver=True)

        assert [i.url for i in items] == ["https://i.redd.it/cover.jpg"]


class TestDestinationUrl:

    def test_gifv_becomes_video(self):
        entry = _entry(url_overridden_by_dest="https://i.imgur.com/x.gifv")

        items = extract_media(entry, data_saver=True)

        assert len(items) == 1
        assert items[0].kind == MediaKind.VIDEO
        assert items[0].url == "https://i.imgur.com/x.mp4"
        assert items[0].thumb is None

    def test_overridden_destination_beats_url(self):
        entry = _entry(url_overridden_by_dest="https://i.redd.it/dest.png", url="https://i.redd.it/plain.jpg")

        assert extract_media(entry, data_saver=False)[0].url == "https://i.redd.it/dest.png"

    def test_hosted_video_hint(self):
        entry = _entry(post_hint="hosted:video", url="https://v.redd.it/abc")

        items = extract_media(entry, data_saver=False)

        assert items[0].kind == MediaKind.VIDEO
        assert items[0].url == "https://v.redd.it/abc"

    def test_gif_uses_preview_in_data_saver(self):
        entry = _entry(url="https://i.redd.it/anim.gif", preview=PREVIEW)

        saver = extract_media(entry, data_saver=True)
        full = extract_media(entry, data_saver=False)

        assert saver[0].kind == MediaKind.IMAGE
        assert saver[0].url == DECODED_PREVIEW
        assert full[0].url == "https://i.redd.it/anim.gif"

    def test_gif_without_preview_keeps_original(self):
        entry = _entry(url="https://i.redd.it/anim.GIF")

        assert extract_media(entry, data_saver=True)[0].url == "https://i.redd.it/anim.GIF"

    def test_static_image(self):
        entry = _entry(url="https://i.redd.it/photo.JPEG", preview=PREVIEW)

        items = extract_media(entry, data_saver=True)

        assert items[0].kind == MediaKind.IMAGE
        assert items[0].url == "https://i.redd.it/photo.JPEG"
        assert items[0].thumb == DECODED_PREVIEW


class TestPreviewAndNoMatch:

    def test_preview_only(self):
        entry = _entry(url="https://example.com/article", preview=PREVIEW)

        items = extract_media(entry, data_saver=False)

        assert len(items) == 1
        assert items[0].kind == MediaKind.IMAGE
        assert items[0].url == DECODED_PREVIEW

    def test_null_preview_image_keeps_entry(self):
        entry = _entry(id="x1", url="https://i.redd.it/x.jpg", preview={"images": [None]})

        items = extract_media(entry, data_saver=True)

        assert [i.id for i in items] == ["x1"]
        assert items[0].thumb is None

    def test_non_object_preview_source_keeps_entry(self):
        entry = _entry(url="https://i.redd.it/x.jpg", preview={"images": [{"source": "nope"}]})

        assert [i.url for i in extract_media(entry, data_saver=True)] == ["https://i.redd.it/x.jpg"]

    def test_text_post_yields_nothing(self):
        entry = _entry(url="https://www.reddit.com/r/pics/comments/a1/a_post/")

        assert extract_media(entry, data_saver=True) == []

    def test_relative_url_never_emitted(self):
        entry = _entry(url="/r/pics/photo.jpg")

        assert extract_media(entry, data_saver=True) == []


def test_extraction_is_deterministic():
    entry = _entry(url="https://i.redd.it/anim.gif", preview=PREVIEW)

    assert extract_media(entry, data_saver=True) == extract_media(entry, data_saver=True)


class TestExtractListing:

    def test_walks_children_and_skips_malformed(self):
        payload = {
            "data": {
                "children": [
                    {"data": {"id": "p1", "ups": 3, "url": "https://i.redd.it/1.jpg"}},
                    {"data": {"title": "no id", "url": "https://i.redd.it/2.jpg"}},
                    {"kind": "t3"},
                    "garbage",
                    {"data": {"id": "p3", "ups": 1, "url": "https://i.redd.it/3.png"}},
                ]
            }
        }

        items = extract_listing(payload, data_saver=True, collection="pics")

        assert [i.id for i in items] == ["p1", "p3"]
        assert all(i.collection == "pics" for i in items)

    def test_missing_structure_is_empty(self):
        assert extract_listing({}, data_saver=True) == []
        assert extract_listing({"data": {"children": None}}, data_saver=True) == []
        assert extract_listing([1, 2], data_saver=True) == []

    def test_entry_with_null_sub_elements_survives_listing_walk(self):
        payload = {
            "data": {
                "children": [
                    {
                        "data": {
                            "id": "g1",
                            "is_gallery": True,
                            "gallery_data": {"items": [{"media_id": "m1"}, {"media_id": "m2"}]},
                            "media_metadata": {"m1": {"s": {"u": "https://i.redd.it/m1.jpg"}}, "m2": None},
                            "preview": {"images": [None]},
                        }
                    },
                ]
            }
        }

        items = extract_listing(payload, data_saver=True, collection="pics")

        assert [i.id for i in items] == ["g1-0"]
