"""Sitemap writers - urlset files, rollover, compression and the index."""

from sitemapkit.writer.base import MAX_ENTRIES, MAX_FILE_SIZE, BaseFile
from sitemapkit.writer.compress import FinalizedFiles, compress_file, finalize_directory
from sitemapkit.writer.index import DEFAULT_INDEX_FILE_NAME, IndexFile
from sitemapkit.writer.models import (
    AlternateLink,
    ChangeFrequency,
    ImageBlock,
    NewsBlock,
    SitemapRef,
    UrlEntry,
    VideoBlock,
)
from sitemapkit.writer.rollover import DEFAULT_FILE_NAME_PATTERN, RolloverCoordinator
from sitemapkit.writer.services import (
    AliasResolver,
    FileFinder,
    GlobFileFinder,
    PathResolver,
    StaticUrlBuilder,
    UrlBuilder,
)
from sitemapkit.writer.urlset import UrlSetFile
from sitemapkit.writer.utils import normalize_date

__all__ = [
    "MAX_ENTRIES",
    "MAX_FILE_SIZE",
    "BaseFile",
    "UrlSetFile",
    "IndexFile",
    "RolloverCoordinator",
    "DEFAULT_FILE_NAME_PATTERN",
    "DEFAULT_INDEX_FILE_NAME",
    "FinalizedFiles",
    "compress_file",
    "finalize_directory",
    "normalize_date",
    # Models
    "AlternateLink",
    "ChangeFrequency",
    "ImageBlock",
    "NewsBlock",
    "SitemapRef",
    "UrlEntry",
    "VideoBlock",
    # Services
    "AliasResolver",
    "FileFinder",
    "GlobFileFinder",
    "PathResolver",
    "StaticUrlBuilder",
    "UrlBuilder",
]
