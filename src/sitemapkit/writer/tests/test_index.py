"""Tests for sitemap index files."""

from __future__ import annotations

import gzip
import os
from datetime import date
from pathlib import Path

import pytest

from sitemapkit.errors import EntryLimitExceeded, NotFoundError, ValidationError
from sitemapkit.writer.index import IndexFile
from sitemapkit.writer.models import SitemapRef

BASE_URL = "https://x.com/sitemap"


def make_index(directory: Path, **kwargs) -> IndexFile:
    kwargs.setdefault("file_base_url", BASE_URL)
    return IndexFile(file_base_path=directory, **kwargs)


def listed_locs(index_path: Path) -> list[str]:
    content = index_path.read_text()
    return [
        line[len("<loc>"):-len("</loc>")]
        for line in content.splitlines()
        if line.startswith("<loc>")
    ]


class TestIndexFile:
    """Test writing index entries by hand."""

    def test_document_structure(self, sitemap_dir: Path):
        index = make_index(sitemap_dir)
        index.write_sitemap("https://x.com/sitemap/sitemap1.xml.gz", "2024-01-15")
        index.close()

        assert (sitemap_dir / "sitemap_index.xml").read_text() == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
            "<sitemap>\n"
            "<loc>https://x.com/sitemap/sitemap1.xml.gz</loc>\n"
            "<lastmod>2024-01-15</lastmod>\n"
            "</sitemap>\n"
            "</sitemapindex>\n"
        )

    def test_lastmod_defaults_to_today(self, sitemap_dir: Path):
        index = make_index(sitemap_dir)
        index.write_sitemap("https://x.com/sitemap/sitemap1.xml.gz")
        index.close()
        content = (sitemap_dir / "sitemap_index.xml").read_text()
        assert f"<lastmod>{date.today().isoformat()}</lastmod>" in content

    def test_timestamp_lastmod(self, sitemap_dir: Path):
        """Test that a timestamp and its ISO date give the same lastmod."""
        index = make_index(sitemap_dir)
        index.write_sitemap("https://x.com/1.xml.gz", "1700000000")
        index.write_sitemap("https://x.com/2.xml.gz", "2023-11-14")
        index.close()
        content = (sitemap_dir / "sitemap_index.xml").read_text()
        assert content.count("<lastmod>2023-11-14</lastmod>") == 2

    def test_out_of_range_timestamp(self, sitemap_dir: Path):
        index = make_index(sitemap_dir)
        with pytest.raises(ValidationError):
            index.write_sitemap("https://x.com/1.xml.gz", 1700000000000)
        assert index.entries_count == 0
        index.release()

    def test_add_sitemap_ref(self, sitemap_dir: Path):
        index = make_index(sitemap_dir)
        written = index.add_sitemap_ref(SitemapRef(loc="https://x.com/a.xml.gz", lastmod="2024-01-01"))
        index.close()
        assert written > 0
        assert index.entries_count == 1

    def test_entry_limit(self, sitemap_dir: Path):
        index = make_index(sitemap_dir, max_entries=1)
        index.write_sitemap("https://x.com/1.xml.gz")
        with pytest.raises(EntryLimitExceeded):
            index.write_sitemap("https://x.com/2.xml.gz")
        index.close()

    def test_default_file_base_url(self, sitemap_dir: Path, url_builder):
        index = IndexFile(file_base_path=sitemap_dir, url_builder=url_builder)
        assert index.file_base_url == "https://example.com/app/sitemap"

    def test_custom_file_name(self, sitemap_dir: Path):
        with make_index(sitemap_dir, file_name="index.xml") as index:
            index.write_sitemap("https://x.com/1.xml.gz")
        assert (sitemap_dir / "index.xml").exists()


class TestWriteUpFromPath:
    """Test filling the index from a directory."""

    def test_lists_compressed_files_without_self_reference(self, out_of_band_dir: Path):
        index = make_index(out_of_band_dir)
        count = index.write_up_from_path(out_of_band_dir)

        assert count == 2
        assert listed_locs(out_of_band_dir / "sitemap_index.xml") == [
            f"{BASE_URL}/a.xml.gz",
            f"{BASE_URL}/b.xml.gz",
        ]
        assert sorted(p.name for p in out_of_band_dir.iterdir()) == [
            "a.xml.gz",
            "b.xml.gz",
            "sitemap_index.xml",
        ]
        assert index.is_closed

    def test_compressed_content(self, out_of_band_dir: Path, read_gz):
        make_index(out_of_band_dir).write_up_from_path(out_of_band_dir)
        assert "<loc>http://x.com/a</loc>" in read_gz(out_of_band_dir / "a.xml.gz")

    def test_idempotent(self, out_of_band_dir: Path):
        """Test that a second run keeps the same files and does not fail."""
        make_index(out_of_band_dir).write_up_from_path(out_of_band_dir)
        first = {p.name: p.read_bytes() for p in out_of_band_dir.glob("*.gz")}

        count = make_index(out_of_band_dir).write_up_from_path(out_of_band_dir)
        second = {p.name: p.read_bytes() for p in out_of_band_dir.glob("*.gz")}

        assert count == 2
        assert first == second
        assert not [p for p in out_of_band_dir.glob("*.xml") if p.name != "sitemap_index.xml"]

    def test_previously_compressed_listed_first(self, out_of_band_dir: Path):
        (out_of_band_dir / "c.xml.gz").write_bytes(gzip.compress(b"<urlset/>"))
        make_index(out_of_band_dir).write_up_from_path(out_of_band_dir)
        assert listed_locs(out_of_band_dir / "sitemap_index.xml") == [
            f"{BASE_URL}/c.xml.gz",
            f"{BASE_URL}/a.xml.gz",
            f"{BASE_URL}/b.xml.gz",
        ]

    def test_leftover_pair_compressed_wins(self, out_of_band_dir: Path):
        """Test that an interrupted run (xml + xml.gz) is treated as finalized."""
        existing = gzip.compress(b"<urlset>previous run</urlset>")
        (out_of_band_dir / "a.xml.gz").write_bytes(existing)

        count = make_index(out_of_band_dir).write_up_from_path(out_of_band_dir)

        assert count == 2
        assert (out_of_band_dir / "a.xml.gz").read_bytes() == existing
        assert not (out_of_band_dir / "a.xml").exists()
        assert listed_locs(out_of_band_dir / "sitemap_index.xml") == [
            f"{BASE_URL}/a.xml.gz",
            f"{BASE_URL}/b.xml.gz",
        ]

    def test_lastmod_from_file_time(self, sitemap_dir: Path):
        gz = sitemap_dir / "old.xml.gz"
        gz.write_bytes(gzip.compress(b"<urlset/>"))
        os.utime(gz, (1700000000, 1700000000))

        make_index(sitemap_dir).write_up_from_path(sitemap_dir)
        content = (sitemap_dir / "sitemap_index.xml").read_text()
        assert "<lastmod>2023-11-14</lastmod>" in content

    def test_gz_only_directory(self, sitemap_dir: Path):
        """Test that a directory with only compressed files is indexed."""
        (sitemap_dir / "a.xml.gz").write_bytes(gzip.compress(b"<urlset/>"))
        assert make_index(sitemap_dir).write_up_from_path(sitemap_dir) == 1

    def test_empty_directory(self, sitemap_dir: Path):
        with pytest.raises(NotFoundError) as exc_info:
            make_index(sitemap_dir).write_up_from_path(sitemap_dir)
        assert exc_info.value.path == sitemap_dir
        assert not (sitemap_dir / "sitemap_index.xml").exists()

    def test_only_index_file(self, sitemap_dir: Path):
        """Test that the index file alone does not count as a sitemap."""
        (sitemap_dir / "sitemap_index.xml").write_text("<sitemapindex/>")
        with pytest.raises(NotFoundError):
            make_index(sitemap_dir).write_up_from_path(sitemap_dir)

    def test_index_in_other_directory(self, out_of_band_dir: Path, tmp_path: Path):
        """Test that an index stored elsewhere lists every xml of the source directory."""
        (out_of_band_dir / "sitemap_index.xml").unlink()
        index_dir = tmp_path / "public"
        count = make_index(index_dir).write_up_from_path(out_of_band_dir)
        assert count == 2
        assert (index_dir / "sitemap_index.xml").exists()

    def test_write_up_uses_own_directory(self, out_of_band_dir: Path):
        assert make_index(out_of_band_dir).write_up() == 2

    def test_alias_path(self, out_of_band_dir: Path):
        from sitemapkit.writer.services import AliasResolver

        resolver = AliasResolver({"@sitemaps": str(out_of_band_dir)})
        index = make_index(out_of_band_dir, path_resolver=resolver)
        assert index.write_up_from_path("@sitemaps") == 2
