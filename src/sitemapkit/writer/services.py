"""Collaborator services injected into sitemap writers.

Writers never look up framework globals. Path aliases, absolute URLs and
directory listings come from the three services defined here; callers may
pass their own implementations as long as they follow the same protocols.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol, Union
from urllib.parse import urlencode

Route = Union[str, Sequence[Any]]


class PathResolver(Protocol):
    def resolve_alias(self, path: str | Path) -> Path: ...


class UrlBuilder(Protocol):
    host_info: str
    base_url: str

    def build_absolute_url(self, route: Route) -> str: ...


class FileFinder(Protocol):
    def find_files(self, directory: str | Path, pattern: str) -> list[Path]: ...


class AliasResolver:
    """Resolves ``@alias/rest`` style paths against an alias map.

    Usage:
        resolver = AliasResolver({"@app": "/srv/app"})
        resolver.resolve_alias("@app/web/sitemap")  # Path("/srv/app/web/sitemap")
    """

    def __init__(self, aliases: Mapping[str, str | Path] | None = None):
        self.aliases = {name: str(target) for name, target in (aliases or {}).items()}

    def resolve_alias(self, path: str | Path) -> Path:
        text = str(path)
        if not text.startswith("@"):
            return Path(text)

        name, sep, rest = text.partition("/")
        if name not in self.aliases:
            raise ValueError(f"Unknown path alias: {name}")
        target = self.aliases[name]
        # Aliases may themselves point at other aliases
        resolved = self.resolve_alias(target) if target.startswith("@") else Path(target)
        return resolved / rest if sep and rest else resolved


class StaticUrlBuilder:
    """Builds absolute URLs from a fixed host and base path.

    A route is either a string (absolute URLs are returned as-is, relative
    ones are joined to the host) or a sequence ``[route, {params}]``.
    """

    def __init__(self, host_info: str = "http://localhost", base_url: str = ""):
        self.host_info = host_info.rstrip("/")
        self.base_url = ("/" + base_url.strip("/")) if base_url.strip("/") else ""

    def build_absolute_url(self, route: Route) -> str:
        if isinstance(route, str):
            if route.startswith(("http://", "https://")):
                return route
            return f"{self.host_info}{self.base_url}/{route.lstrip('/')}"

        if not route:
            raise ValueError("Route must not be empty")

        path = str(route[0]).strip("/")
        params: dict[str, Any] = {}
        for extra in route[1:]:
            if isinstance(extra, Mapping):
                params.update(extra)
        url = f"{self.host_info}{self.base_url}/{path}"
        if params:
            url += "?" + urlencode(params)
        return url


class GlobFileFinder:
    """Lists files in one directory matching a glob pattern, sorted by name."""

    def find_files(self, directory: str | Path, pattern: str) -> list[Path]:
        base = Path(directory)
        if not base.is_dir():
            return []
        return sorted(p for p in base.glob(pattern) if p.is_file())
