"""Tests for URL normalization/validation and short code sanitization."""

import pytest

from shortener.core.validators import (
    is_valid_url,
    normalize_url,
    sanitize_short_code,
    validate_custom_code,
)


class TestURLNormalization:
    """Scheme-less input gets https://, everything else is left alone."""

    @pytest.mark.parametrize("raw, expected", [
        ("example.com/page", "https://example.com/page"),
        ("  example.com  ", "https://example.com"),
        ("http://example.com", "http://example.com"),
        ("https://example.com/a?b=c", "https://example.com/a?b=c"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
        # A host that merely starts with "http" still needs a scheme
        ("httpbin.org/get", "https://httpbin.org/get"),
        ("ftp://example.com", "ftp://example.com"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_url(raw) == expected

    def test_empty_stays_empty(self):
        assert normalize_url("") == ""
        assert normalize_url(None) == ""


class TestURLValidation:
    """Test URL validation function."""

    def test_valid_urls(self):
        """Test that valid URLs are accepted."""
        valid_urls = [
            "http://example.com",
            "https://example.com",
            "https://www.example.com/path/to/page",
            "http://subdomain.example.com:8080/path?query=value",
            "https://en.wikipedia.org/wiki/File:Example.jpg",
            "https://example.com/search?q=metadata:author",
            "https://example.com/docs/javascript:void",
        ]
        for url in valid_urls:
            assert is_valid_url(url), f"Should be valid: {url}"

    def test_invalid_urls(self):
        """Test that invalid URLs are rejected."""
        invalid_urls = [
            "not-a-url",
            "ftp://example.com",  # FTP not supported
            "javascript:alert(1)",
            "data:text/html,hello",
            "file:///etc/passwd",
            "example.com",  # Missing scheme
            "",
            "http://",  # Missing domain
            "http://localhost",  # No host.tld shape
            "https://example.",  # Empty TLD
            "https://example.com:notaport/",
            "https://example.com/" + "a" * 2048,  # Too long
        ]
        for url in invalid_urls:
            assert not is_valid_url(url), f"Should be invalid: {url}"

    def test_non_string_rejected(self):
        assert not is_valid_url(None)
        assert not is_valid_url(12345)


class TestShortCodeSanitization:

    def test_accepts_url_safe_codes(self):
        assert sanitize_short_code("aZ09_-") == "aZ09_-"
        assert sanitize_short_code("  abc123 ") == "abc123"

    @pytest.mark.parametrize("code", ["", "abc/def", "a b", "../etc", "x" * 33, "ñandú"])
    def test_rejects_unsafe_codes(self, code):
        assert sanitize_short_code(code) is None

    def test_custom_code_minimum_length(self):
        assert validate_custom_code("ab") is None
        assert validate_custom_code("abc") == "abc"

    @pytest.mark.parametrize("code", ["api", "docs", "Health", "redoc"])
    def test_custom_code_cannot_shadow_routes(self, code):
        assert validate_custom_code(code) is None
