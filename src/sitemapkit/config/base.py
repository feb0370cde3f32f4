"""
Sitemap configuration management.

Loads configuration from the sitemap.config file in the current directory.
This file stores project-specific settings like output paths, base URLs
and the per-file limits.
"""

from datetime import date
from pathlib import Path
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field, field_validator

from sitemapkit.writer.base import MAX_ENTRIES, MAX_FILE_SIZE
from sitemapkit.writer.compress import COMPRESSION_LEVEL
from sitemapkit.writer.index import DEFAULT_INDEX_FILE_NAME
from sitemapkit.writer.models import ChangeFrequency
from sitemapkit.writer.rollover import DEFAULT_FILE_NAME_PATTERN
from sitemapkit.writer.services import AliasResolver, GlobFileFinder, StaticUrlBuilder

CONFIG_FILE_NAME = "sitemap.config"


class SitemapConfig(BaseModel):
    """Sitemap project configuration."""

    # Configuration defaults (ClassVar to avoid treating as fields)
    DEFAULT_SITEMAPS_PATH: ClassVar[str] = "web/sitemap"
    DEFAULT_HOST_INFO: ClassVar[str] = "http://localhost"
    ALIAS_PREFIX: ClassVar[str] = "ALIAS."

    PATH_SITEMAPS: str = Field(
        default=DEFAULT_SITEMAPS_PATH,
        description="Directory for sitemap files (relative to sitemap.config location, aliases allowed)",
    )
    PATH_INDEX: Optional[str] = Field(
        default=None,
        description="Directory for the index file (defaults to PATH_SITEMAPS)",
    )
    FILE_NAME_PATTERN: str = Field(
        default=DEFAULT_FILE_NAME_PATTERN,
        description="Sitemap file name with a {number} placeholder",
    )
    INDEX_FILE_NAME: str = Field(default=DEFAULT_INDEX_FILE_NAME)
    HOST_INFO: str = Field(
        default=DEFAULT_HOST_INFO,
        description="Scheme and host used to build absolute URLs",
    )
    BASE_URL: str = Field(default="", description="Base path of the site below the host")
    FILE_BASE_URL: Optional[str] = Field(
        default=None,
        description="Public URL of the sitemap directory (defaults to HOST_INFO + BASE_URL + /sitemap)",
    )
    MAX_FILE_SIZE: int = Field(default=MAX_FILE_SIZE, ge=1, description="Maximum bytes per file")
    MAX_ENTRIES: int = Field(default=MAX_ENTRIES, ge=1, description="Maximum entries per file")
    COMPRESSION_LEVEL: int = Field(default=COMPRESSION_LEVEL, ge=0, le=9)
    DEFAULT_CHANGEFREQ: Optional[ChangeFrequency] = Field(default=None)
    DEFAULT_PRIORITY: Optional[str] = Field(default=None)
    DEFAULT_LASTMOD: Optional[str] = Field(
        default=None,
        description="Default last-modified value ('today' for the current date)",
    )

    # Path aliases are stored as extra fields with dot notation: ALIAS.@app=/srv/app
    model_config = {"extra": "allow"}

    @field_validator(
        "DEFAULT_CHANGEFREQ",
        "DEFAULT_PRIORITY",
        "DEFAULT_LASTMOD",
        "PATH_INDEX",
        "FILE_BASE_URL",
        mode="before",
    )
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        """Treat empty strings from the config file as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def aliases(self) -> dict[str, str]:
        """Return the path aliases declared with ALIAS.<name> keys."""
        extra = getattr(self, "__pydantic_extra__", None) or {}
        return {
            key[len(self.ALIAS_PREFIX):]: str(value)
            for key, value in extra.items()
            if key.startswith(self.ALIAS_PREFIX)
        }

    def default_options(self) -> dict[str, Any]:
        """Return the options merged under every URL entry."""
        options: dict[str, Any] = {}
        if self.DEFAULT_LASTMOD:
            lastmod = self.DEFAULT_LASTMOD
            options["lastmod"] = date.today().isoformat() if lastmod == "today" else lastmod
        if self.DEFAULT_CHANGEFREQ:
            options["changefreq"] = self.DEFAULT_CHANGEFREQ.value
        if self.DEFAULT_PRIORITY:
            options["priority"] = self.DEFAULT_PRIORITY
        return options

    def build_services(self) -> tuple[AliasResolver, StaticUrlBuilder, GlobFileFinder]:
        """Create the path resolver, URL builder and file finder for this project."""
        aliases = {name: self._absolute(target) for name, target in self.aliases().items()}
        return (
            AliasResolver(aliases),
            StaticUrlBuilder(self.HOST_INFO, self.BASE_URL),
            GlobFileFinder(),
        )

    def _get_project_root(self) -> Path:
        """Get project root directory (where sitemap.config is located) - internal use."""
        return get_config_file_path().parent

    def _absolute(self, value: str) -> str:
        if value.startswith("@") or Path(value).is_absolute():
            return value
        return str(self._get_project_root() / value)

    def get_sitemaps_path(self) -> str:
        """Get the sitemap directory, absolute unless it is an alias."""
        return self._absolute(self.PATH_SITEMAPS)

    def get_index_path(self) -> str:
        """Get the index directory, absolute unless it is an alias."""
        return self._absolute(self.PATH_INDEX or self.PATH_SITEMAPS)


def get_config_file_path() -> Path:
    """Get the path to the sitemap configuration file."""
    return Path.cwd() / CONFIG_FILE_NAME


def load_config() -> SitemapConfig:
    """
    Load sitemap configuration from sitemap.config in the current directory.

    The sitemap.config file should contain key=value pairs:

    PATH_SITEMAPS=web/sitemap
    HOST_INFO="https://example.com"
    MAX_ENTRIES=50000

    # Path aliases (dot notation)
    ALIAS.@web=/srv/www

    Returns:
        SitemapConfig with loaded settings

    Raises:
        FileNotFoundError: If sitemap.config doesn't exist
        ValueError: If configuration is invalid
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        raise FileNotFoundError(
            f"Sitemap configuration file not found: {config_file}\n"
            "Run 'sitemapkit init' to create one."
        )

    config_data = {}
    with open(config_file, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                config_data[key] = value

    # Pydantic handles type conversion of the string values
    return SitemapConfig(**config_data)


def create_config(
    sitemaps_path: str = SitemapConfig.DEFAULT_SITEMAPS_PATH,
    host_info: str = SitemapConfig.DEFAULT_HOST_INFO,
    base_url: str = "",
) -> SitemapConfig:
    """
    Create a new sitemap.config file in the current directory.

    Args:
        sitemaps_path: Directory for sitemap files (relative to sitemap.config location)
        host_info: Scheme and host of the site
        base_url: Base path of the site below the host

    Returns:
        SitemapConfig instance
    """
    config = SitemapConfig(PATH_SITEMAPS=sitemaps_path, HOST_INFO=host_info, BASE_URL=base_url)
    update_config(config)
    return config


def update_config(config: SitemapConfig) -> None:
    """
    Write a SitemapConfig to the sitemap.config file.

    Args:
        config: SitemapConfig instance to save
    """
    config_file = get_config_file_path()
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w") as f:
        f.write("# Sitemap Project Configuration\n")
        f.write("# This file is auto-generated by 'sitemapkit init'\n\n")
        f.write(f'PATH_SITEMAPS="{config.PATH_SITEMAPS}"\n')
        f.write(f'PATH_INDEX="{config.PATH_INDEX or ""}"\n')
        f.write(f'FILE_NAME_PATTERN="{config.FILE_NAME_PATTERN}"\n')
        f.write(f'INDEX_FILE_NAME="{config.INDEX_FILE_NAME}"\n')
        f.write(f'HOST_INFO="{config.HOST_INFO}"\n')
        f.write(f'BASE_URL="{config.BASE_URL}"\n')
        f.write(f'FILE_BASE_URL="{config.FILE_BASE_URL or ""}"\n')
        f.write("\n# Limits\n")
        f.write(f"MAX_FILE_SIZE={config.MAX_FILE_SIZE}\n")
        f.write(f"MAX_ENTRIES={config.MAX_ENTRIES}\n")
        f.write(f"COMPRESSION_LEVEL={config.COMPRESSION_LEVEL}\n")
        f.write("\n# Entry defaults (empty means not written)\n")
        changefreq = config.DEFAULT_CHANGEFREQ.value if config.DEFAULT_CHANGEFREQ else ""
        f.write(f'DEFAULT_CHANGEFREQ="{changefreq}"\n')
        f.write(f'DEFAULT_PRIORITY="{config.DEFAULT_PRIORITY or ""}"\n')
        f.write(f'DEFAULT_LASTMOD="{config.DEFAULT_LASTMOD or ""}"\n')

        aliases = config.aliases()
        if aliases:
            f.write("\n# Path aliases\n")
            for name, target in sorted(aliases.items()):
                f.write(f'{SitemapConfig.ALIAS_PREFIX}{name}="{target}"\n')


def config_file_exists() -> bool:
    """Check if sitemap.config exists."""
    return get_config_file_path().exists()


def get_config_or_default() -> SitemapConfig:
    """
    Get configuration, or return default if sitemap.config doesn't exist.

    Returns:
        SitemapConfig with loaded or default settings
    """
    if config_file_exists():
        return load_config()
    return SitemapConfig()
