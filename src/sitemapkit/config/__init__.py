"""
Sitemap configuration module.

Manages the project settings stored in sitemap.config:
- Output paths and file naming
- Host and base URL used for absolute URLs
- Per-file limits and compression level
- Entry defaults and path aliases (ALIAS.* dot notation)
"""

from sitemapkit.config.base import (
    CONFIG_FILE_NAME,
    SitemapConfig,
    config_file_exists,
    create_config,
    get_config_file_path,
    get_config_or_default,
    load_config,
    update_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "SitemapConfig",
    "config_file_exists",
    "create_config",
    "get_config_file_path",
    "get_config_or_default",
    "load_config",
    "update_config",
]
