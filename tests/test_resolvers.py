"""Tests for media url rewriting and per-network content selection."""

import pytest

from crosspost.services.social.content_resolver import ContentResolver
from crosspost.services.social.media_resolver import IMAGE, VIDEO, MediaResolver, classify, normalise_url


APP = "https://app.crosspost.test"


class TestNormaliseUrl:
    def test_relative_path_gets_app_base(self):
        assert normalise_url("/uploads/a.jpg", app_url=APP) == "https://app.crosspost.test/uploads/a.jpg"

    def test_proxy_is_unwrapped(self):
        url = "/api/media/proxy?url=https%3A%2F%2Fcdn.test%2Fclip.mp4"
        assert normalise_url(url, kind=VIDEO, app_url=APP) == "https://cdn.test/clip.mp4"

    @pytest.mark.parametrize(
        "url",
        [
            "https://drive.google.com/file/d/AbC_123-x/view?usp=sharing",
            "https://drive.google.com/open?id=AbC_123-x",
            "https://drive.google.com/uc?id=AbC_123-x",
        ],
    )
    def test_drive_links_become_direct_downloads(self, url):
        assert normalise_url(url, app_url=APP) == "https://drive.google.com/uc?export=download&id=AbC_123-x"

    def test_thumbnail_cdn_rewritten_for_video_only(self):
        url = "https://lh3.googleusercontent.com/d/File9"
        assert normalise_url(url, kind=VIDEO, app_url=APP) == "https://drive.google.com/uc?export=download&id=File9"
        assert normalise_url(url, kind=IMAGE, app_url=APP) == url

    def test_absolute_url_untouched(self):
        assert normalise_url("https://cdn.test/a.png", app_url=APP) == "https://cdn.test/a.png"


class TestClassify:
    @pytest.mark.parametrize(
        "item, kind",
        [
            ({"asset_type": "video", "url": "x.jpg"}, VIDEO),
            ({"mime_type": "video/quicktime", "url": "x"}, VIDEO),
            ({"filename": "clip.MOV", "url": "https://cdn.test/123"}, VIDEO),
            ({"url": "https://cdn.test/photo.webp?w=400"}, IMAGE),
            ({"url": "https://cdn.test/blob"}, IMAGE),
        ],
    )
    def test_kinds(self, item, kind):
        assert classify(item) == kind

    def test_resolve_skips_items_without_url(self):
        refs = MediaResolver.resolve([{"url": "/a.jpg"}, {"filename": "orphan.mp4"}, "junk"], app_url=APP)
        assert [r.url for r in refs] == ["https://app.crosspost.test/a.jpg"]


class TestContentResolver:
    POST = {"content": "Shared body", "content_per_platform": {"x": "Short one", "linkedin": "   "}}

    def test_override_wins(self):
        assert ContentResolver.resolve(self.POST, "x") == "Short one"

    def test_blank_override_falls_back(self):
        assert ContentResolver.resolve(self.POST, "linkedin") == "Shared body"

    def test_no_override(self):
        assert ContentResolver.resolve(self.POST, "facebook") == "Shared body"
        assert ContentResolver.resolve({}, "facebook") == ""
