"""Gzip compression of finished sitemap files."""

from __future__ import annotations

import gzip
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from sitemapkit.errors import NotFoundError, SitemapIOError, SizeLimitExceeded
from sitemapkit.writer.base import MAX_FILE_SIZE
from sitemapkit.writer.services import FileFinder, GlobFileFinder
from sitemapkit.writer.utils import normalize_date

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9
GZIP_SUFFIX = ".gz"


def gzip_path(path: Path) -> Path:
    return path.with_name(path.name + GZIP_SUFFIX)


def compress_file(
    path: Path,
    *,
    level: int = COMPRESSION_LEVEL,
    max_file_size: int = MAX_FILE_SIZE,
) -> Path:
    """Compress a sitemap file and delete the original.

    The archive is written under a temporary name and renamed into place
    once its size has been checked, so an existing ``.gz`` is always complete.

    Args:
        path: Uncompressed file
        level: Gzip compression level
        max_file_size: Maximum size of the compressed file in bytes

    Returns:
        Path of the compressed file (original name + ".gz")

    Raises:
        SizeLimitExceeded: If the compressed file exceeds max_file_size
        SitemapIOError: On any read, write, rename or delete failure
    """
    target = gzip_path(path)
    tmp = target.with_name(target.name + ".tmp")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise SitemapIOError(path, "read", e) from e

    # mtime=0 keeps the output byte-identical across runs
    compressed = gzip.compress(data, compresslevel=level, mtime=0)
    if len(compressed) > max_file_size:
        raise SizeLimitExceeded(target, len(compressed), max_file_size)

    try:
        tmp.write_bytes(compressed)
        os.replace(tmp, target)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise SitemapIOError(target, "write", e) from e

    try:
        path.unlink()
    except OSError as e:
        raise SitemapIOError(path, "delete", e) from e

    logger.debug(
        "Compressed %s: %d -> %d bytes", path.name, len(data), len(compressed)
    )
    return target


def file_lastmod(path: Path) -> str:
    """Last-modified date of a file as an ISO date."""
    try:
        return normalize_date(int(path.stat().st_mtime))
    except OSError as e:
        raise SitemapIOError(path, "stat", e) from e


@dataclass
class FinalizedFiles:
    """Compressed sitemap files found or produced in a directory."""

    previous: list[Path] = field(default_factory=list)
    compressed: list[Path] = field(default_factory=list)

    @property
    def all(self) -> list[Path]:
        """Previously compressed files first, then newly compressed ones."""
        return self.previous + self.compressed


def finalize_directory(
    directory: str | Path,
    *,
    exclude: Optional[Path] = None,
    file_finder: Optional[FileFinder] = None,
    level: int = COMPRESSION_LEVEL,
    max_file_size: int = MAX_FILE_SIZE,
) -> FinalizedFiles:
    """Compress every bare ``*.xml`` sitemap of a directory.

    Existing ``*.gz`` files are kept as already finalized. When both
    ``name.xml`` and ``name.xml.gz`` exist (an interrupted earlier run)
    the compressed file wins and the stale ``.xml`` is removed.

    Args:
        directory: Directory holding the sitemap files
        exclude: File to skip, normally the index file itself
        file_finder: Service listing the directory
        level: Gzip compression level
        max_file_size: Maximum size of a compressed file in bytes

    Returns:
        FinalizedFiles with previous and newly compressed files

    Raises:
        NotFoundError: If the directory holds no sitemap files at all
    """
    finder = file_finder or GlobFileFinder()
    directory = Path(directory)
    excluded = exclude.resolve() if exclude is not None else None

    previous = [p for p in finder.find_files(directory, "*" + GZIP_SUFFIX)]
    xml_files = [
        p for p in finder.find_files(directory, "*.xml") if p.resolve() != excluded
    ]
    if not previous and not xml_files:
        raise NotFoundError(directory)

    existing = {p.resolve() for p in previous}
    result = FinalizedFiles(previous=previous)
    for xml_file in xml_files:
        if gzip_path(xml_file).resolve() in existing:
            logger.warning(
                "Removing stale %s: compressed copy already exists", xml_file.name
            )
            try:
                xml_file.unlink()
            except OSError as e:
                raise SitemapIOError(xml_file, "delete", e) from e
            continue
        result.compressed.append(
            compress_file(xml_file, level=level, max_file_size=max_file_size)
        )

    logger.info(
        "Finalized %s: %d existing, %d newly compressed",
        directory,
        len(result.previous),
        len(result.compressed),
    )
    return result
