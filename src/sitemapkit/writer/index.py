"""Writer for sitemap index documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from sitemapkit.writer.base import BaseFile
from sitemapkit.writer.compress import COMPRESSION_LEVEL, finalize_directory, file_lastmod
from sitemapkit.writer.models import SitemapRef
from sitemapkit.writer.services import FileFinder, GlobFileFinder, StaticUrlBuilder, UrlBuilder
from sitemapkit.writer.urlset import SITEMAP_NAMESPACE
from sitemapkit.writer.utils import DateLike, normalize_date

logger = logging.getLogger(__name__)

DEFAULT_INDEX_FILE_NAME = "sitemap_index.xml"


class IndexFile(BaseFile):
    """Sitemap index file listing other sitemap files.

    The index can be filled by hand with write_sitemap(), or from the
    sitemap files found in a directory with write_up_from_path(), which
    also compresses any bare ``*.xml`` file it finds.

    Usage:
        index = IndexFile(file_base_path="/srv/web/sitemap",
                          file_base_url="https://example.com/sitemap")
        index.write_up()

    Attributes:
        file_base_url: Base URL of the directory holding the sitemap files.
            Defaults to the URL builder's host and base path + "/sitemap".
    """

    def __init__(
        self,
        file_name: str = DEFAULT_INDEX_FILE_NAME,
        file_base_path: str | Path = ".",
        *,
        file_base_url: Optional[str] = None,
        url_builder: Optional[UrlBuilder] = None,
        file_finder: Optional[FileFinder] = None,
        compression_level: int = COMPRESSION_LEVEL,
        **kwargs: Any,
    ):
        super().__init__(file_name, file_base_path, **kwargs)
        self.url_builder = url_builder or StaticUrlBuilder()
        self.file_finder = file_finder or GlobFileFinder()
        self.compression_level = compression_level
        self._file_base_url = file_base_url or ""

    @property
    def file_base_url(self) -> str:
        if not self._file_base_url:
            self._file_base_url = self.default_file_base_url()
        return self._file_base_url

    @file_base_url.setter
    def file_base_url(self, value: str) -> None:
        self._file_base_url = value

    def default_file_base_url(self) -> str:
        return f"{self.url_builder.host_info}{self.url_builder.base_url}/sitemap"

    def after_open(self) -> None:
        super().after_open()
        self.write(f'<sitemapindex xmlns="{SITEMAP_NAMESPACE}">\n')

    def before_close(self) -> None:
        self.write("</sitemapindex>\n")
        super().before_close()

    def write_sitemap(self, site_map_file_url: str, last_modified: DateLike = None) -> int:
        """Write one sitemap block.

        Args:
            site_map_file_url: Absolute sitemap file URL
            last_modified: ISO date, Unix timestamp, date, or None for today

        Returns:
            The number of bytes written
        """
        lastmod = normalize_date(last_modified)
        self.increment_entries_count()
        xml = (
            "<sitemap>\n"
            f"<loc>{site_map_file_url}</loc>\n"
            f"<lastmod>{lastmod}</lastmod>\n"
            "</sitemap>\n"
        )
        return self.write(xml)

    def add_sitemap_ref(self, ref: SitemapRef) -> int:
        return self.write_sitemap(ref.loc, ref.lastmod)

    def write_up_from_path(self, path: str | Path) -> int:
        """Fill the index from the sitemap files found in a directory.

        Bare ``*.xml`` files are compressed first; the index file itself is
        never listed. Previously compressed files are listed before newly
        compressed ones. The index is closed afterwards.

        Args:
            path: Directory holding the sitemap files (path aliases allowed)

        Returns:
            Number of sitemaps written

        Raises:
            NotFoundError: If the directory holds no sitemap files
        """
        directory = self.path_resolver.resolve_alias(path)
        # Scan before opening: the index may live in the scanned directory
        finalized = finalize_directory(
            directory,
            exclude=self.full_file_name,
            file_finder=self.file_finder,
            level=self.compression_level,
            max_file_size=self.max_file_size,
        )

        base_url = self.file_base_url.rstrip("/")
        count = 0
        for file in finalized.all:
            self.write_sitemap(f"{base_url}/{file.name}", file_lastmod(file))
            count += 1

        self.close()
        logger.info("Wrote %d sitemap(s) to %s", count, self.full_file_name)
        return count

    build_from_directory = write_up_from_path

    def write_up(self) -> int:
        """Fill the index from the files in its own directory."""
        return self.write_up_from_path(self.file_base_path)
