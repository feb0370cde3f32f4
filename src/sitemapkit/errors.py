"""
Sitemap writer error taxonomy.

Defines a hierarchy of exceptions for sitemap generation errors,
enabling structured error handling and reporting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class SitemapError(Exception):
    """Base exception for all sitemap errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


class NotFoundError(SitemapError):
    """Raised when a directory holds no sitemap files to index."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(
            f'Unable to find site map files under the path "{path}"',
            details={"path": str(path)},
        )
        self.path = Path(path)


class SizeLimitExceeded(SitemapError):
    """Raised when a file (or a single entry) exceeds the configured byte limit.

    Signals that the content set must be split further upstream.
    """

    def __init__(self, path: Path | str, size: int, limit: int) -> None:
        super().__init__(
            f'File "{path}" has exceeded the size limit of "{limit}": '
            f'actual file size: "{size}".',
            details={"path": str(path), "size": size, "limit": limit},
        )
        self.path = Path(path)
        self.size = size
        self.limit = limit


class EntryLimitExceeded(SitemapError):
    """Raised when a document receives more entries than allowed."""

    def __init__(self, path: Path | str, limit: int) -> None:
        super().__init__(
            f'Entries count exceeds limit of "{limit}" at file "{path}".',
            details={"path": str(path), "limit": limit},
        )
        self.path = Path(path)
        self.limit = limit


class ValidationError(SitemapError):
    """Raised when URL options cannot be turned into a sitemap entry."""

    def __init__(
        self,
        message: str,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(
            f"Invalid sitemap entry: {message}",
            details={"validation_errors": validation_errors or []},
        )
        self.validation_errors = validation_errors or []


class DocumentClosedError(SitemapError):
    """Raised when writing to a document that has already been closed."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(
            f'Sitemap file "{path}" is already closed.',
            details={"path": str(path)},
        )
        self.path = Path(path)


class SitemapIOError(SitemapError, OSError):
    """Raised when a sitemap file cannot be opened, written, renamed or deleted.

    Subclasses OSError so callers catching IOError keep working.
    """

    def __init__(self, path: Path | str, operation: str, cause: OSError | None = None) -> None:
        reason = f": {cause}" if cause else ""
        super().__init__(
            f'Unable to {operation} file "{path}"{reason}',
            details={"path": str(path), "operation": operation},
        )
        self.path = Path(path)
        self.operation = operation
        self.cause = cause
