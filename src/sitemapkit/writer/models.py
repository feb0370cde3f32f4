"""Pydantic models for sitemap entries and index references."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from sitemapkit.errors import ValidationError
from sitemapkit.writer.utils import normalize_date

LastModified = Union[int, str, datetime, date]


def check_lastmod(value: Any) -> Any:
    """Reject last-modified values that cannot be turned into a date."""
    if value is not None:
        try:
            normalize_date(value)
        except ValidationError as e:
            raise ValueError(str(e.__cause__ or e)) from e
    return value


class ChangeFrequency(str, Enum):
    """Page change frequency values allowed by sitemaps.org."""

    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


class NewsBlock(BaseModel):
    """Google News publication block. All fields are required together."""

    model_config = {"populate_by_name": True, "extra": "forbid"}

    name: str = Field(..., description="Publication name")
    language: str = Field(..., description="Publication language (e.g., 'en')")
    genres: str = Field(..., description="Comma-separated genres")
    publication_date: Union[str, datetime, date] = Field(..., alias="publicationDate")
    title: str = Field(..., description="Article title")
    keywords: str = Field(..., description="Comma-separated keywords")


class ImageBlock(BaseModel):
    """Google image extension block."""

    model_config = {"populate_by_name": True, "extra": "forbid"}

    location: str = Field(..., description="Image URL")
    caption: Optional[str] = None
    geo_location: Optional[str] = Field(None, alias="geoLocation")
    title: Optional[str] = None
    license: Optional[str] = None


VIDEO_OPTIONAL_FIELDS: tuple[str, ...] = (
    "duration",
    "expiration_date",
    "rating",
    "view_count",
    "publication_date",
    "family_friendly",
    "tag",
    "category",
    "restriction",
    "gallery_loc",
    "price",
    "requires_subscription",
    "uploader",
    "platform",
    "live",
)


class VideoBlock(BaseModel):
    """Google video extension block.

    Either content_loc or player_loc should be given; when both are missing
    the block is still written without a location.
    """

    model_config = {"extra": "forbid"}

    thumbnail_loc: str
    title: str
    description: str
    content_loc: Optional[str] = None
    player_loc: Optional[str] = None

    duration: Optional[Any] = None
    expiration_date: Optional[Any] = None
    rating: Optional[Any] = None
    view_count: Optional[Any] = None
    publication_date: Optional[Any] = None
    family_friendly: Optional[Any] = None
    tag: Optional[Any] = None
    category: Optional[Any] = None
    restriction: Optional[Any] = None
    gallery_loc: Optional[Any] = None
    price: Optional[Any] = None
    requires_subscription: Optional[Any] = None
    uploader: Optional[Any] = None
    platform: Optional[Any] = None
    live: Optional[Any] = None

    def optional_fields(self) -> list[tuple[str, Any]]:
        """Return the set optional fields in their schema order."""
        return [
            (name, getattr(self, name))
            for name in VIDEO_OPTIONAL_FIELDS
            if getattr(self, name) is not None
        ]


class AlternateLink(BaseModel):
    """An ``xhtml:link rel="alternate"`` entry.

    Any attribute besides ``url`` (commonly ``hreflang``) is kept in order.
    """

    model_config = {"extra": "allow"}

    url: Optional[str] = None

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


# camelCase option names accepted for the top-level entry fields
OPTION_ALIASES: dict[str, str] = {
    "lastModified": "lastmod",
    "changeFrequency": "changefreq",
    "video": "videos",
    "alternate": "alternates",
}


def normalize_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Map camelCase option names to entry field names."""
    return {OPTION_ALIASES.get(key, key): value for key, value in (options or {}).items()}


class UrlEntry(BaseModel):
    """One ``<url>`` entry of a urlset document."""

    model_config = {"populate_by_name": True, "extra": "forbid"}

    loc: str = Field(..., description="Absolute page URL")
    lastmod: Optional[LastModified] = Field(None, alias="lastModified")
    changefreq: Optional[ChangeFrequency] = Field(None, alias="changeFrequency")
    priority: Optional[Union[float, str]] = Field(None, description="Not range-checked")
    news: Optional[NewsBlock] = None
    images: list[ImageBlock] = Field(default_factory=list)
    videos: list[VideoBlock] = Field(default_factory=list, alias="video")
    alternates: list[AlternateLink] = Field(default_factory=list, alias="alternate")

    @field_validator("alternates", mode="before")
    @classmethod
    def wrap_single_alternate(cls, v: Any) -> Any:
        """Accept a single alternate mapping as a one-element list."""
        if isinstance(v, Mapping):
            return [v]
        return v

    @field_validator("lastmod")
    @classmethod
    def validate_lastmod(cls, v: Any) -> Any:
        return check_lastmod(v)

    @field_validator("images", "videos", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @classmethod
    def from_options(cls, url: str, options: Mapping[str, Any] | None = None) -> "UrlEntry":
        """Build an entry from a URL and an options mapping.

        Args:
            url: Absolute page URL
            options: Options using snake_case or the camelCase option names

        Returns:
            UrlEntry instance

        Raises:
            ValidationError: If the options are malformed
        """
        try:
            return cls(loc=url, **normalize_options(options))
        except PydanticValidationError as e:
            raise ValidationError(
                f"{url}: {e.error_count()} invalid option(s)",
                validation_errors=[
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in e.errors()
                ],
            ) from e
        except TypeError as e:
            # Duplicate keys such as an explicit "loc" option
            raise ValidationError(f"{url}: {e}") from e


class SitemapRef(BaseModel):
    """One ``<sitemap>`` entry of an index document."""

    loc: str = Field(..., description="Absolute sitemap file URL")
    lastmod: Optional[LastModified] = Field(None, description="None means today")

    @field_validator("lastmod")
    @classmethod
    def validate_lastmod(cls, v: Any) -> Any:
        return check_lastmod(v)
