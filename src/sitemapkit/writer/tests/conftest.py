"""
Test fixtures for sitemap writer tests.
"""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from sitemapkit.writer.services import StaticUrlBuilder


@pytest.fixture
def sitemap_dir(tmp_path: Path) -> Path:
    """
    Create an empty directory for sitemap output.
    """
    directory = tmp_path / "sitemap"
    directory.mkdir()
    return directory


@pytest.fixture
def url_builder() -> StaticUrlBuilder:
    return StaticUrlBuilder("https://example.com", "/app")


@pytest.fixture
def read_gz():
    """Return a helper decoding a gzip file to text."""

    def _read(path: Path) -> str:
        return gzip.decompress(path.read_bytes()).decode("utf-8")

    return _read


@pytest.fixture
def out_of_band_dir(sitemap_dir: Path) -> Path:
    """
    Directory with sitemap files produced out of band plus a stale index.
    """
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        "<url>\n<loc>{loc}</loc>\n</url>\n"
        "</urlset>\n"
    )
    (sitemap_dir / "a.xml").write_text(body.format(loc="http://x.com/a"))
    (sitemap_dir / "b.xml").write_text(body.format(loc="http://x.com/b"))
    (sitemap_dir / "sitemap_index.xml").write_text("<sitemapindex/>")
    return sitemap_dir
