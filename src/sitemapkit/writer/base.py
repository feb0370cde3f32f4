"""Base class for sitemap XML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Optional

from sitemapkit.errors import DocumentClosedError, EntryLimitExceeded, SitemapIOError
from sitemapkit.writer.services import AliasResolver, PathResolver

logger = logging.getLogger(__name__)

# sitemaps.org limits for a single file
MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_ENTRIES = 50_000

XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>\n'


class BaseFile:
    """Byte-level writer for one sitemap XML file.

    The file is opened on demand (first write) or explicitly with open(),
    and closed exactly once. Subclasses emit their root element through
    the after_open() and before_close() hooks.

    Usage:
        with UrlSetFile("sitemap1.xml", "/srv/web/sitemap") as f:
            f.write_url("https://example.com/")
    """

    def __init__(
        self,
        file_name: str,
        file_base_path: str | Path,
        *,
        path_resolver: Optional[PathResolver] = None,
        max_entries: int = MAX_ENTRIES,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        """Initialize the file writer.

        Args:
            file_name: Name of the file inside file_base_path
            file_base_path: Directory for the file (path aliases allowed)
            path_resolver: Service resolving path aliases
            max_entries: Maximum entries allowed in this file
            max_file_size: Maximum size of this file in bytes
        """
        self.path_resolver = path_resolver or AliasResolver()
        self.file_name = file_name
        self.file_base_path = self.path_resolver.resolve_alias(file_base_path)
        self.max_entries = max_entries
        self.max_file_size = max_file_size
        self.entries_count = 0
        self.bytes_written = 0
        self._handle: Optional[IO[bytes]] = None
        self._closed = False

    @property
    def full_file_name(self) -> Path:
        return self.file_base_path / self.file_name

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        """Create (or truncate) the target file and write the root opening."""
        if self._closed:
            raise DocumentClosedError(self.full_file_name)
        if self._handle is not None:
            return

        path = self.full_file_name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(path, "wb")
        except OSError as e:
            raise SitemapIOError(path, "open", e) from e

        logger.debug("Opened sitemap file %s", path)
        self.after_open()

    def after_open(self) -> None:
        """Hook called right after the file has been opened."""
        self.write(XML_PROLOG)

    def before_close(self) -> None:
        """Hook called right before the file handle is closed."""

    def write(self, content: str) -> int:
        """Write text to the file, opening it first if needed.

        Returns:
            The number of bytes written
        """
        return self.write_bytes(content.encode("utf-8"))

    def write_bytes(self, data: bytes) -> int:
        """Write already-encoded bytes to the file, opening it first if needed."""
        if self._handle is None:
            self.open()

        try:
            self._handle.write(data)
        except OSError as e:
            raise SitemapIOError(self.full_file_name, "write", e) from e
        self.bytes_written += len(data)
        return len(data)

    def increment_entries_count(self) -> int:
        """Count one more entry, failing when the limit is crossed."""
        if self._closed:
            raise DocumentClosedError(self.full_file_name)
        if self.entries_count + 1 > self.max_entries:
            raise EntryLimitExceeded(self.full_file_name, self.max_entries)
        self.entries_count += 1
        return self.entries_count

    def close(self) -> None:
        """Write the root closing and release the handle. Repeated calls are no-ops."""
        if self._closed:
            return
        if self._handle is None:
            # Nothing written yet: still produce a well-formed (empty) document
            self.open()

        try:
            self.before_close()
        finally:
            self._release()
        logger.debug(
            "Closed sitemap file %s (%d entries, %d bytes)",
            self.full_file_name,
            self.entries_count,
            self.bytes_written,
        )

    def release(self) -> None:
        """Release the file handle without finishing the document."""
        if not self._closed:
            logger.debug("Releasing unfinished sitemap file %s", self.full_file_name)
            self._release()

    def _release(self) -> None:
        handle, self._handle = self._handle, None
        self._closed = True
        if handle is not None:
            try:
                handle.close()
            except OSError as e:
                raise SitemapIOError(self.full_file_name, "close", e) from e

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.release()

    def __del__(self) -> None:
        handle = getattr(self, "_handle", None)
        if handle is not None:
            handle.close()
