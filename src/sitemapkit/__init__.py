"""XML sitemap generation for search-engine crawling.

This package provides:
- Writer: urlset and sitemap index files with news/image/video/alternate
  extensions, automatic rollover, gzip compression and directory indexing
- Config: Project configuration management (SitemapConfig)
- Errors: Exception hierarchy for sitemap generation
"""

__version__ = "0.1.0"

# Config module - project configuration
from sitemapkit.config import SitemapConfig as SitemapConfig
from sitemapkit.config import config_file_exists as config_file_exists
from sitemapkit.config import create_config as create_config
from sitemapkit.config import get_config_or_default as get_config_or_default
from sitemapkit.config import load_config as load_config

# Errors
from sitemapkit.errors import NotFoundError as NotFoundError
from sitemapkit.errors import SitemapError as SitemapError
from sitemapkit.errors import SitemapIOError as SitemapIOError
from sitemapkit.errors import SizeLimitExceeded as SizeLimitExceeded
from sitemapkit.errors import ValidationError as ValidationError

# Writers
from sitemapkit.writer import MAX_ENTRIES as MAX_ENTRIES
from sitemapkit.writer import MAX_FILE_SIZE as MAX_FILE_SIZE
from sitemapkit.writer import IndexFile as IndexFile
from sitemapkit.writer import RolloverCoordinator as RolloverCoordinator
from sitemapkit.writer import UrlSetFile as UrlSetFile
