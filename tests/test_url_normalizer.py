"""
Unit tests for URL normalization and deduplication.
"""

import pytest

from image_checker.core.data_models import ImageRequest
from image_checker.core.url_normalizer import is_valid_url_format, normalize_requests


def requests_for(*urls):
    return [ImageRequest(url=url) for url in urls]


class TestIsValidURLFormat:
    """Tests for is_valid_url_format."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://a/1.jpg",
            "http://example.com/image.png?size=large",
            "https://cdn.example.com:8443/path/to/img.webp",
        ],
    )
    def test_absolute_urls_accepted(self, url):
        assert is_valid_url_format(url)

    @pytest.mark.parametrize(
        "url",
        [
            "not-a-url",
            "",
            None,
            42,
            "/relative/path.png",
            "http://",
            "http://[::1",
            "https://a b/1.jpg",
            "http://:80/x.png",
            "http://user@/x.png",
            "https://a:port/1.jpg",
            "https://a:99999/1.jpg",
        ],
    )
    def test_malformed_urls_rejected(self, url):
        assert not is_valid_url_format(url)


class TestNormalizeRequests:
    """Tests for normalize_requests."""

    def test_duplicates_removed_keeping_first(self):
        result = normalize_requests(
            requests_for("https://a/1.jpg", "https://a/1.jpg", "https://a/2.jpg")
        )

        assert result.urls == ["https://a/1.jpg", "https://a/2.jpg"]
        assert result.duplicates == 1
        assert result.malformed == 0

    def test_malformed_silently_dropped(self):
        result = normalize_requests(requests_for("not-a-url", "https://a/1.jpg"))

        assert result.urls == ["https://a/1.jpg"]
        assert result.malformed == 1

    def test_order_follows_first_occurrence(self):
        result = normalize_requests(
            requests_for(
                "https://a/3.jpg",
                "https://a/1.jpg",
                "https://a/3.jpg",
                "https://a/2.jpg",
                "https://a/1.jpg",
            )
        )

        assert result.urls == ["https://a/3.jpg", "https://a/1.jpg", "https://a/2.jpg"]

    def test_exact_string_comparison(self):
        """No trailing-slash or case folding is applied."""
        result = normalize_requests(
            requests_for(
                "https://a/img",
                "https://a/img/",
                "HTTPS://a/img",
            )
        )

        assert len(result) == 3

    def test_empty_input(self):
        result = normalize_requests([])

        assert result.urls == []
        assert len(result) == 0

    def test_unusable_hosts_dropped(self):
        result = normalize_requests(
            requests_for("https://a b/1.jpg", "http://:80/x.png", "https://a/1.jpg")
        )

        assert result.urls == ["https://a/1.jpg"]
        assert result.malformed == 2

    def test_records_without_url(self):
        requests = [
            ImageRequest.from_record({"imageUrl": "https://a/1.jpg"}),
            ImageRequest.from_record({"other": "https://a/2.jpg"}),
            ImageRequest.from_record("https://a/3.jpg"),
            ImageRequest.from_record({"imageUrl": 7}),
        ]

        result = normalize_requests(requests)

        assert result.urls == ["https://a/1.jpg"]
        assert result.malformed == 3
