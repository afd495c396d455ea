"""Tests for URL helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from navim.core.urls import from_user_input, has_scheme, resolve_href


class TestHasScheme:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("http://example.org", True),
            ("https://example.org/a", True),
            ("file:///tmp/x.html", True),
            ("about:blank", True),
            ("mailto:someone@example.org", True),
            ("example.org", False),
            ("localhost:8000", False),
            ("/tmp/page.html", False),
        ],
    )
    def test_has_scheme(self, text, expected):
        assert has_scheme(text) is expected


class TestFromUserInput:
    """Tests for turning prompt input into a URL."""

    def test_keeps_scheme(self):
        assert from_user_input("https://example.org/") == "https://example.org/"

    def test_adds_http(self):
        assert from_user_input("example.org") == "http://example.org"

    def test_host_with_port(self):
        assert from_user_input("localhost:8000/x") == "http://localhost:8000/x"

    def test_strips_whitespace(self):
        assert from_user_input("  example.org \n") == "http://example.org"

    def test_empty(self):
        assert from_user_input("") == ""
        assert from_user_input("   ") == ""

    def test_absolute_path_becomes_file_url(self):
        assert from_user_input("/tmp/page.html") == Path("/tmp/page.html").as_uri()

    def test_home_path_is_expanded(self):
        url = from_user_input("~/page.html")
        assert url.startswith("file://")
        assert "~" not in url


class TestResolveHref:
    """Tests for resolving link targets."""

    def test_absolute_href_unchanged(self):
        assert resolve_href("http://other.test/x", "http://site.test/a/b") == "http://other.test/x"

    def test_root_relative_href(self):
        assert resolve_href("/docs", "http://site.test/a/b") == "http://site.test/docs"

    def test_relative_href_uses_host_root(self):
        """Relative links resolve against the host, not the current path."""
        assert resolve_href("page.html", "https://site.test/a/b") == "https://site.test/page.html"

    def test_fragment(self):
        assert resolve_href("#top", "http://site.test/a") == "http://site.test/#top"

    def test_keeps_port(self):
        assert resolve_href("/x", "http://site.test:8080/y") == "http://site.test:8080/x"
