"""Multi-file sitemap writer with automatic rollover."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any, Optional

from sitemapkit.errors import SitemapIOError, SizeLimitExceeded
from sitemapkit.writer.base import MAX_ENTRIES, MAX_FILE_SIZE
from sitemapkit.writer.compress import (
    COMPRESSION_LEVEL,
    FinalizedFiles,
    compress_file,
    file_lastmod,
    finalize_directory,
)
from sitemapkit.writer.index import IndexFile
from sitemapkit.writer.models import SitemapRef
from sitemapkit.writer.services import (
    AliasResolver,
    FileFinder,
    GlobFileFinder,
    PathResolver,
    Route,
    StaticUrlBuilder,
    UrlBuilder,
)
from sitemapkit.writer.urlset import UrlSetFile

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME_PATTERN = "sitemap{number}.xml"


class RolloverCoordinator:
    """Writes URLs across as many sitemap files as the limits require.

    A new file is opened before an entry that would push the active file
    over max_entries or max_file_size. finalize_all() closes and compresses
    every file and returns the references for the index.

    Usage:
        with RolloverCoordinator("/srv/web/sitemap",
                                 file_base_url="https://example.com/sitemap") as sitemaps:
            for url in urls:
                sitemaps.add_url(url, {"changefreq": "daily"})
            refs = sitemaps.finalize_all()
    """

    def __init__(
        self,
        file_base_path: str | Path,
        *,
        file_name_pattern: str = DEFAULT_FILE_NAME_PATTERN,
        file_base_url: Optional[str] = None,
        max_file_size: int = MAX_FILE_SIZE,
        max_entries: int = MAX_ENTRIES,
        compression_level: int = COMPRESSION_LEVEL,
        default_options: Optional[Mapping[str, Any]] = None,
        path_resolver: Optional[PathResolver] = None,
        url_builder: Optional[UrlBuilder] = None,
        file_finder: Optional[FileFinder] = None,
    ):
        """Initialize the coordinator.

        Args:
            file_base_path: Directory for the sitemap files (path aliases allowed)
            file_name_pattern: File name with a {number} placeholder
            file_base_url: Base URL of the sitemap directory; defaults to
                the URL builder's host and base path + "/sitemap"
            max_file_size: Maximum bytes per file
            max_entries: Maximum entries per file
            compression_level: Gzip compression level
            default_options: Options merged under every add_url() call
            path_resolver: Service resolving path aliases
            url_builder: Service building absolute URLs from routes
            file_finder: Service listing directories
        """
        if "{number}" not in file_name_pattern:
            raise ValueError(f"File name pattern must contain '{{number}}': {file_name_pattern}")
        if max_entries < 1 or max_file_size < 1:
            raise ValueError("max_entries and max_file_size must be positive")

        self.path_resolver = path_resolver or AliasResolver()
        self.url_builder = url_builder or StaticUrlBuilder()
        self.file_finder = file_finder or GlobFileFinder()
        self.file_base_path = self.path_resolver.resolve_alias(file_base_path)
        self.file_name_pattern = file_name_pattern
        self.file_base_url = (
            file_base_url or f"{self.url_builder.host_info}{self.url_builder.base_url}/sitemap"
        ).rstrip("/")
        self.max_file_size = max_file_size
        self.max_entries = max_entries
        self.compression_level = compression_level
        self.default_options = dict(default_options or {})

        self.documents: list[UrlSetFile] = []
        self.refs: list[SitemapRef] = []
        self.entries_count = 0

    @property
    def current(self) -> Optional[UrlSetFile]:
        if self.documents and not self.documents[-1].is_closed:
            return self.documents[-1]
        return None

    def file_name(self, number: int) -> str:
        return self.file_name_pattern.format(number=number)

    def _open_next(self) -> UrlSetFile:
        document = UrlSetFile(
            self.file_name(len(self.documents) + 1),
            self.file_base_path,
            url_builder=self.url_builder,
            default_options=self.default_options,
            path_resolver=self.path_resolver,
            max_entries=self.max_entries,
            max_file_size=self.max_file_size,
        )
        document.open()
        self.documents.append(document)
        logger.debug("Rolled over to %s", document.full_file_name)
        return document

    def _discard(self, document: UrlSetFile) -> None:
        """Drop an empty document so it is neither finalized nor indexed."""
        document.release()
        self.documents.remove(document)
        try:
            document.full_file_name.unlink(missing_ok=True)
        except OSError as e:
            raise SitemapIOError(document.full_file_name, "delete", e) from e
        logger.debug("Discarded empty sitemap file %s", document.full_file_name)

    def add_url(self, url: Route, options: Optional[Mapping[str, Any]] = None) -> int:
        """Write one URL, rolling over to a new file when a limit would be crossed.

        Returns:
            The number of bytes appended

        Raises:
            ValidationError: If the options are malformed
            SizeLimitExceeded: If the entry alone does not fit in an empty file
        """
        document = self.current or self._open_next()
        try:
            rendered = document.prepare_url(url, options)
        except Exception:
            if document.entries_count == 0:
                self._discard(document)
            raise

        if (
            document.entries_count + 1 > self.max_entries
            or document.projected_size(rendered) > self.max_file_size
        ):
            if document.entries_count == 0:
                self._discard(document)
                raise SizeLimitExceeded(
                    document.full_file_name,
                    document.projected_size(rendered),
                    self.max_file_size,
                )
            document.close()
            document = self._open_next()
            # Namespaces of the new file differ, so the check is repeated
            if document.projected_size(rendered) > self.max_file_size:
                self._discard(document)
                raise SizeLimitExceeded(
                    document.full_file_name,
                    document.projected_size(rendered),
                    self.max_file_size,
                )

        written = document.add_rendered(rendered)
        self.entries_count += 1
        return written

    write_url = add_url

    def add_urls(self, urls: Iterable[Route | tuple[Route, Mapping[str, Any]]]) -> int:
        """Write many URLs; items are URLs or (url, options) pairs.

        Returns:
            Number of entries written
        """
        count = 0
        for item in urls:
            if isinstance(item, tuple) and len(item) == 2 and isinstance(item[1], Mapping):
                self.add_url(item[0], item[1])
            else:
                self.add_url(item)
            count += 1
        return count

    def close(self) -> None:
        """Close every open file without compressing."""
        for document in self.documents:
            document.close()

    def release(self) -> None:
        """Release every file handle, leaving unfinished files incomplete."""
        for document in self.documents:
            document.release()

    def finalize_all(self) -> list[SitemapRef]:
        """Close, compress and verify every file written so far.

        Each original is deleted once its compressed copy has been written
        and size-checked. Files finalized by an earlier call are not touched.

        Returns:
            References (compressed file URL, compression date) for the index

        Raises:
            SizeLimitExceeded: If a compressed file exceeds max_file_size
            SitemapIOError: On any file system failure
        """
        self.close()
        finalized = {ref.loc for ref in self.refs}
        for document in self.documents:
            url = f"{self.file_base_url}/{document.file_name}.gz"
            if url in finalized:
                continue
            compressed = compress_file(
                document.full_file_name,
                level=self.compression_level,
                max_file_size=self.max_file_size,
            )
            self.refs.append(SitemapRef(loc=url, lastmod=date.today().isoformat()))
            logger.debug("Finalized %s", compressed)

        logger.info(
            "Finalized %d sitemap file(s) with %d entries in %s",
            len(self.documents),
            self.entries_count,
            self.file_base_path,
        )
        return list(self.refs)

    def finalize_directory(self, *, exclude: Optional[Path] = None) -> list[SitemapRef]:
        """Finalize the sitemap files already present in the base directory.

        Used for files produced out of band: existing ``*.gz`` files are kept,
        bare ``*.xml`` files are compressed.

        Raises:
            NotFoundError: If the directory holds no sitemap files
        """
        result: FinalizedFiles = finalize_directory(
            self.file_base_path,
            exclude=exclude,
            file_finder=self.file_finder,
            level=self.compression_level,
            max_file_size=self.max_file_size,
        )
        return [
            SitemapRef(loc=f"{self.file_base_url}/{path.name}", lastmod=file_lastmod(path))
            for path in result.all
        ]

    def write_index(self, index: Optional[IndexFile] = None) -> IndexFile:
        """Finalize the files and write their references into an index.

        Args:
            index: Index to fill; defaults to sitemap_index.xml in the base path

        Returns:
            The closed IndexFile
        """
        refs = self.finalize_all()
        if index is None:
            index = IndexFile(
                file_base_path=self.file_base_path,
                file_base_url=self.file_base_url,
                url_builder=self.url_builder,
                path_resolver=self.path_resolver,
                file_finder=self.file_finder,
                compression_level=self.compression_level,
            )
        for ref in refs:
            index.add_sitemap_ref(ref)
        index.close()
        return index

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            logger.debug("Releasing %d sitemap file(s) after error", len(self.documents))
            self.release()
