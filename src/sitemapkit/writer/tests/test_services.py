"""Tests for writer collaborator services."""

from __future__ import annotations

from pathlib import Path

import pytest

from sitemapkit.writer.services import AliasResolver, GlobFileFinder, StaticUrlBuilder


class TestAliasResolver:
    def test_plain_path(self):
        assert AliasResolver().resolve_alias("web/sitemap") == Path("web/sitemap")

    def test_alias_with_rest(self):
        resolver = AliasResolver({"@app": "/srv/app"})
        assert resolver.resolve_alias("@app/web/sitemap") == Path("/srv/app/web/sitemap")

    def test_bare_alias(self):
        resolver = AliasResolver({"@app": "/srv/app"})
        assert resolver.resolve_alias("@app") == Path("/srv/app")

    def test_nested_alias(self):
        """Test that an alias may point at another alias."""
        resolver = AliasResolver({"@app": "/srv/app", "@web": "@app/web"})
        assert resolver.resolve_alias("@web/sitemap") == Path("/srv/app/web/sitemap")

    def test_unknown_alias(self):
        with pytest.raises(ValueError, match="@missing"):
            AliasResolver().resolve_alias("@missing/x")


class TestStaticUrlBuilder:
    def test_normalizes_host_and_base(self):
        builder = StaticUrlBuilder("https://example.com/", "app/")
        assert builder.host_info == "https://example.com"
        assert builder.base_url == "/app"

    def test_empty_base(self):
        assert StaticUrlBuilder("https://example.com", "/").base_url == ""

    def test_absolute_url_passes_through(self, url_builder):
        assert url_builder.build_absolute_url("http://other.com/x") == "http://other.com/x"

    def test_relative_url(self, url_builder):
        assert url_builder.build_absolute_url("/news/1") == "https://example.com/app/news/1"

    def test_route_with_params(self, url_builder):
        url = url_builder.build_absolute_url(["news/view", {"id": 42, "lang": "en"}])
        assert url == "https://example.com/app/news/view?id=42&lang=en"

    def test_route_without_params(self, url_builder):
        assert url_builder.build_absolute_url(["site/index"]) == "https://example.com/app/site/index"

    def test_empty_route(self, url_builder):
        with pytest.raises(ValueError):
            url_builder.build_absolute_url([])


class TestGlobFileFinder:
    def test_sorted_non_recursive(self, sitemap_dir: Path):
        for name in ("b.xml", "a.xml", "c.txt"):
            (sitemap_dir / name).write_text("x")
        nested = sitemap_dir / "nested"
        nested.mkdir()
        (nested / "d.xml").write_text("x")

        found = GlobFileFinder().find_files(sitemap_dir, "*.xml")
        assert [p.name for p in found] == ["a.xml", "b.xml"]

    def test_missing_directory(self, tmp_path: Path):
        assert GlobFileFinder().find_files(tmp_path / "missing", "*.xml") == []
