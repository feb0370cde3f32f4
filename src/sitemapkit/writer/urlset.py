"""Writer for sitemap ``<urlset>`` documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NamedTuple, Optional

from sitemapkit.errors import SizeLimitExceeded
from sitemapkit.writer.base import XML_PROLOG, BaseFile
from sitemapkit.writer.models import UrlEntry, normalize_options
from sitemapkit.writer.services import Route, StaticUrlBuilder, UrlBuilder
from sitemapkit.writer.utils import cdata, normalize_date

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"

# Extension prefix -> namespace, in declaration order
EXTENSION_NAMESPACES: dict[str, str] = {
    "news": "http://www.google.com/schemas/sitemap-news/0.9",
    "image": "http://www.google.com/schemas/sitemap-image/1.1",
    "video": "http://www.google.com/schemas/sitemap-video/1.1",
}

URLSET_FOOTER = "</urlset>\n"


class RenderedUrl(NamedTuple):
    """A ``<url>`` block ready to be appended to a document."""

    loc: str
    chunk: bytes
    extensions: frozenset[str]


def render_entry(entry: UrlEntry) -> tuple[str, frozenset[str]]:
    """Render one entry as a ``<url>`` block.

    Returns:
        Tuple of (xml text, extension prefixes used by the block)
    """
    extensions: set[str] = set()
    lines = ["<url>", f"<loc>{entry.loc}</loc>"]

    if entry.lastmod is not None:
        lines.append(f"<lastmod>{normalize_date(entry.lastmod)}</lastmod>")
    if entry.changefreq is not None:
        lines.append(f"<changefreq>{entry.changefreq.value}</changefreq>")
    if entry.priority is not None:
        lines.append(f"<priority>{entry.priority}</priority>")

    if entry.news is not None:
        extensions.add("news")
        news = entry.news
        published = news.publication_date
        if not isinstance(published, str):
            published = published.isoformat()
        lines += [
            "<news:news>",
            "   <news:publication>",
            f"       <news:name>{news.name}</news:name>",
            f"       <news:language>{news.language}</news:language>",
            "   </news:publication>",
            f"   <news:genres>{news.genres}</news:genres>",
            f"   <news:publication_date>{published}</news:publication_date>",
            f"   <news:title>{cdata(news.title.strip())}</news:title>",
            f"   <news:keywords>{cdata(news.keywords.strip())}</news:keywords>",
            "</news:news>",
        ]

    if entry.images:
        extensions.add("image")
        for image in entry.images:
            lines.append("<image:image>")
            lines.append(f"   <image:loc>{cdata(image.location)}</image:loc>")
            if image.caption is not None:
                lines.append(f"   <image:caption>{cdata(image.caption)}</image:caption>")
            if image.geo_location is not None:
                lines.append(f"   <image:geo_location>{image.geo_location}</image:geo_location>")
            if image.title is not None:
                lines.append(f"   <image:title>{cdata(image.title)}</image:title>")
            if image.license is not None:
                lines.append(f"   <image:license>{cdata(image.license)}</image:license>")
            lines.append("</image:image>")

    if entry.videos:
        extensions.add("video")
        for video in entry.videos:
            lines += [
                "<video:video>",
                f"   <video:thumbnail_loc>{cdata(video.thumbnail_loc)}</video:thumbnail_loc>",
                f"   <video:title>{cdata(video.title)}</video:title>",
                f"   <video:description>{cdata(video.description)}</video:description>",
            ]
            if video.content_loc is not None:
                lines.append(f"   <video:content_loc>{cdata(video.content_loc)}</video:content_loc>")
            elif video.player_loc is not None:
                lines.append(f"   <video:player_loc>{cdata(video.player_loc)}</video:player_loc>")
            else:
                logger.warning(
                    "Video %r on %s has neither content_loc nor player_loc",
                    video.title,
                    entry.loc,
                )
            for name, value in video.optional_fields():
                lines.append(f"   <video:{name}>{cdata(value)}</video:{name}>")
            lines.append("</video:video>")

    for alternate in entry.alternates:
        link = '<xhtml:link rel="alternate"'
        if alternate.url is not None:
            link += f' href="{alternate.url}"'
        for key, value in alternate.attributes.items():
            link += f' {key}="{value}"'
        lines.append(link + "/>")

    lines.append("</url>")
    return "\n".join(lines) + "\n", frozenset(extensions)


def urlset_header(extensions: frozenset[str] | set[str] = frozenset()) -> str:
    """Build the prolog and ``<urlset>`` opening for the given extensions."""
    namespaces = "".join(
        f' xmlns:{prefix}="{uri}"'
        for prefix, uri in EXTENSION_NAMESPACES.items()
        if prefix in extensions
    )
    return (
        XML_PROLOG
        + f'<urlset xmlns="{SITEMAP_NAMESPACE}" xmlns:xhtml="{XHTML_NAMESPACE}"{namespaces}>\n'
    )


class UrlSetFile(BaseFile):
    """Sitemap file holding ``<url>`` entries.

    Entries are rendered as they are added but the document is written on
    close(), so the root element declares exactly the extension namespaces
    its entries use.

    Usage:
        sitemap = UrlSetFile("sitemap1.xml", "/srv/web/sitemap")
        sitemap.write_url("https://example.com/")
        sitemap.write_url("https://example.com/news", {"priority": "0.7"})
        sitemap.close()
    """

    def __init__(
        self,
        file_name: str,
        file_base_path: str | Path,
        *,
        url_builder: Optional[UrlBuilder] = None,
        default_options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ):
        super().__init__(file_name, file_base_path, **kwargs)
        self.url_builder = url_builder or StaticUrlBuilder()
        self.default_options = normalize_options(default_options)
        self._body: list[bytes] = []
        self._body_size = 0
        self._extensions: set[str] = set()

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset(self._extensions)

    @property
    def size(self) -> int:
        """Size in bytes of the document as it would be written now."""
        return self._document_size(self._extensions, self._body_size)

    def _document_size(self, extensions: set[str] | frozenset[str], body_size: int) -> int:
        header = urlset_header(extensions).encode("utf-8")
        return len(header) + body_size + len(URLSET_FOOTER.encode("utf-8"))

    def prepare_url(self, url: Route, options: Optional[Mapping[str, Any]] = None) -> RenderedUrl:
        """Validate and render an entry without adding it.

        Raises:
            ValidationError: If the options are malformed
        """
        if not isinstance(url, str):
            url = self.url_builder.build_absolute_url(url)
        merged = {**self.default_options, **normalize_options(options)}
        entry = UrlEntry.from_options(url, merged)
        text, extensions = render_entry(entry)
        return RenderedUrl(entry.loc, text.encode("utf-8"), extensions)

    def projected_size(self, rendered: RenderedUrl) -> int:
        """Size in bytes of the document if the rendered entry were added."""
        return self._document_size(
            self._extensions | rendered.extensions,
            self._body_size + len(rendered.chunk),
        )

    def add_rendered(self, rendered: RenderedUrl) -> int:
        """Append a rendered entry.

        Returns:
            The number of bytes appended

        Raises:
            EntryLimitExceeded: If the entry limit would be crossed
            SizeLimitExceeded: If the byte limit would be crossed
        """
        if self._handle is None:
            self.open()
        projected = self.projected_size(rendered)
        if projected > self.max_file_size:
            raise SizeLimitExceeded(self.full_file_name, projected, self.max_file_size)
        self.increment_entries_count()

        self._body.append(rendered.chunk)
        self._body_size += len(rendered.chunk)
        self._extensions |= rendered.extensions
        return len(rendered.chunk)

    def write_url(self, url: Route, options: Optional[Mapping[str, Any]] = None) -> int:
        """Write one URL block.

        Args:
            url: Absolute page URL, or a route resolved by the URL builder
            options: Entry options; valid keys are lastmod (lastModified),
                changefreq (changeFrequency), priority, news, images,
                videos (video) and alternates (alternate)

        Returns:
            The number of bytes written
        """
        return self.add_rendered(self.prepare_url(url, options))

    add_url = write_url

    def after_open(self) -> None:
        # Header depends on the entries; written on close
        pass

    def before_close(self) -> None:
        self.write(urlset_header(self._extensions))
        for chunk in self._body:
            self.write_bytes(chunk)
        self.write(URLSET_FOOTER)
        self._body.clear()
