"""sitemapkit CLI - Main command-line interface."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

import click
from rich.console import Console

from sitemapkit import __version__
from sitemapkit.config import (
    SitemapConfig,
    config_file_exists,
    create_config,
    get_config_file_path,
    get_config_or_default,
)
from sitemapkit.errors import SitemapError
from sitemapkit.writer import IndexFile, RolloverCoordinator

console = Console()

LOG_FORMAT = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default="text",
    help="Output format (json for scripts, text for humans)",
)


def print_json(data: Any) -> None:
    """Print JSON output for scripts."""
    print(json.dumps(data, indent=2, default=str))


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def read_entries(path: Path) -> Iterator[tuple[str, dict[str, Any]]]:
    """Read entries from a text file.

    Each non-empty line is either a URL or a JSON object with a "url" key
    and entry options (JSON Lines). Lines starting with '#' are skipped.
    """
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if not line.startswith("{"):
                yield line, {}
                continue

            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"{path}:{line_no}: invalid JSON: {e}") from e
            url = data.pop("url", None) or data.pop("loc", None)
            if not url:
                raise click.ClickException(f"{path}:{line_no}: missing 'url'")
            yield url, data


def build_coordinator(
    config: SitemapConfig,
    output: str | None = None,
    file_base_url: str | None = None,
) -> RolloverCoordinator:
    path_resolver, url_builder, file_finder = config.build_services()
    return RolloverCoordinator(
        output or config.get_sitemaps_path(),
        file_name_pattern=config.FILE_NAME_PATTERN,
        file_base_url=file_base_url or config.FILE_BASE_URL,
        max_file_size=config.MAX_FILE_SIZE,
        max_entries=config.MAX_ENTRIES,
        compression_level=config.COMPRESSION_LEVEL,
        default_options=config.default_options(),
        path_resolver=path_resolver,
        url_builder=url_builder,
        file_finder=file_finder,
    )


def build_index(
    config: SitemapConfig,
    index_path: str | None = None,
    file_base_url: str | None = None,
) -> IndexFile:
    path_resolver, url_builder, file_finder = config.build_services()
    return IndexFile(
        config.INDEX_FILE_NAME,
        index_path or config.get_index_path(),
        file_base_url=file_base_url or config.FILE_BASE_URL,
        url_builder=url_builder,
        file_finder=file_finder,
        compression_level=config.COMPRESSION_LEVEL,
        path_resolver=path_resolver,
        max_file_size=config.MAX_FILE_SIZE,
        max_entries=config.MAX_ENTRIES,
    )


@click.group()
@click.version_option(version=__version__, prog_name="sitemapkit")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """
    sitemapkit - XML sitemap generator.

    Writes sitemaps.org sitemap files with automatic rollover,
    gzip compression and a sitemap index.
    """
    setup_logging(verbose)


@main.command()
@click.option(
    "--sitemaps-path",
    default=SitemapConfig.DEFAULT_SITEMAPS_PATH,
    help=f"Directory for sitemap files (default: {SitemapConfig.DEFAULT_SITEMAPS_PATH})",
)
@click.option(
    "--host-info",
    default=SitemapConfig.DEFAULT_HOST_INFO,
    help="Scheme and host of the site (e.g., https://example.com)",
)
@click.option("--base-url", default="", help="Base path of the site below the host")
def init(sitemaps_path: str, host_info: str, base_url: str):
    """
    Create a sitemap.config file in the current directory.

    Example:
        sitemapkit init --host-info https://example.com
    """
    if config_file_exists():
        console.print(f"[yellow]Configuration already exists:[/yellow] {get_config_file_path()}")
        return

    config = create_config(sitemaps_path=sitemaps_path, host_info=host_info, base_url=base_url)
    console.print(f"[green]✓[/green] Created {get_config_file_path()}")
    console.print(f"[dim]Sitemaps will be written to {config.get_sitemaps_path()}[/dim]")


@main.command("build")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", help="Directory for sitemap files (overrides PATH_SITEMAPS)")
@click.option("--file-base-url", help="Public URL of the sitemap directory")
@click.option("--max-entries", type=int, help="Maximum entries per file")
@click.option("--max-file-size", type=int, help="Maximum bytes per file")
@click.option("--no-index", is_flag=True, help="Do not write the sitemap index")
@format_option
def build_cmd(
    input_file: Path,
    output: str | None,
    file_base_url: str | None,
    max_entries: int | None,
    max_file_size: int | None,
    no_index: bool,
    output_format: str,
):
    """
    Write sitemap files for the URLs listed in INPUT_FILE.

    INPUT_FILE holds one URL per line, or JSON Lines objects with a "url"
    key and entry options (lastmod, changefreq, priority, news, images,
    videos, alternates).

    \b
    Examples:
        sitemapkit build urls.txt
        sitemapkit build entries.jsonl --output public/sitemap
        sitemapkit build urls.txt --max-entries 1000 --format json
    """
    config = get_config_or_default()
    overrides = {}
    if max_entries is not None:
        overrides["MAX_ENTRIES"] = max_entries
    if max_file_size is not None:
        overrides["MAX_FILE_SIZE"] = max_file_size
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        with build_coordinator(config, output, file_base_url) as sitemaps:
            for url, options in read_entries(input_file):
                sitemaps.add_url(url, options)
            if sitemaps.entries_count == 0:
                raise click.ClickException(f"No URLs found in {input_file}")

            if no_index:
                refs = sitemaps.finalize_all()
                index_file = None
            else:
                index_path = output or config.get_index_path()
                index = sitemaps.write_index(build_index(config, index_path, sitemaps.file_base_url))
                refs = sitemaps.refs
                index_file = str(index.full_file_name)
    except SitemapError as e:
        raise click.ClickException(e.message) from e

    if output_format == "json":
        print_json(
            {
                "entries": sitemaps.entries_count,
                "files": [ref.loc for ref in refs],
                "index": index_file,
            }
        )
        return

    console.print(
        f"[green]✓[/green] Wrote {sitemaps.entries_count} URL(s) to {len(refs)} sitemap file(s)"
    )
    for ref in refs:
        console.print(f"  [dim]{ref.loc}[/dim]")
    if index_file:
        console.print(f"[green]✓[/green] Index: {index_file}")


@main.command("index")
@click.argument("directory", required=False)
@click.option("--file-base-url", help="Public URL of the sitemap directory")
@format_option
def index_cmd(directory: str | None, file_base_url: str | None, output_format: str):
    """
    Compress the sitemap files in DIRECTORY and write the sitemap index.

    Existing .gz files are kept; bare .xml files are compressed first.
    DIRECTORY defaults to PATH_SITEMAPS from sitemap.config.

    \b
    Examples:
        sitemapkit index
        sitemapkit index public/sitemap --file-base-url https://example.com/sitemap
    """
    config = get_config_or_default()
    source = directory or config.get_sitemaps_path()
    index = build_index(config, directory, file_base_url)

    try:
        count = index.write_up_from_path(source)
    except SitemapError as e:
        raise click.ClickException(e.message) from e

    if output_format == "json":
        print_json({"sitemaps": count, "index": str(index.full_file_name)})
        return

    console.print(f"[green]✓[/green] Indexed {count} sitemap file(s) in {index.full_file_name}")


if __name__ == "__main__":
    main()
